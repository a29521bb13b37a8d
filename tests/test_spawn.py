"""End-to-end tests: chains that spawn real processes."""

import pytest

from conftest import needs
from shell_proxy.lib.command import ExecutionResult
from shell_proxy.proxy import build_native
from shell_proxy.registry import make_shell

GARBAGE = "alsdkfjlaskdfjlaskjdffksjdf"


@pytest.fixture
def native(engine):
    return build_native(engine=engine)


@pytest.fixture
def sh(engine):
    return make_shell(engine)


def assert_same_result(a: ExecutionResult, b: ExecutionResult) -> None:
    assert a.stdout == b.stdout
    assert a.stderr == b.stderr
    assert a.exit_code == b.exit_code


@needs("echo")
def test_very_long_chain(native):
    res = native.echo.one.two.three.four.five.six("seven")
    assert res.stdout == "one two three four five six seven\n"
    assert res.stderr == ""
    assert res.exit_code == 0


def test_garbage_command(native, sh):
    assert sh.which(GARBAGE) is None
    assert native[GARBAGE]().exit_code != 0
    assert sh[GARBAGE]().exit_code != 0


@needs("whoami")
def test_whoami(sh):
    assert_same_result(sh.whoami(), sh.exec("whoami"))


@needs("wc")
def test_wc(sh, tmp_path):
    (tmp_path / "file.txt").write_text("This is a file\nthat has 2 lines\n")
    assert_same_result(sh.wc("file.txt"), sh.exec("wc file.txt"))


@needs("true")
def test_true(native, sh):
    assert_same_result(native.true(), sh.exec("true"))


@needs("rmdir")
def test_rmdir(sh, tmp_path):
    sh.mkdir("sub")
    res = sh.rmdir("sub")
    assert res.stdout == ""
    assert res.stderr == ""
    assert res.exit_code == 0
    assert not (tmp_path / "sub").exists()


@needs("printf")
def test_printf_to_file(sh, tmp_path):
    r1 = sh.printf("first second third").to(tmp_path / "file1.txt")
    assert str(sh.cat("file1.txt")) == "first second third"
    r2 = sh.printf("first second third").to(tmp_path / "file2.txt")
    assert str(sh.cat("file2.txt")) == "first second third"
    assert_same_result(r1, r2)


@needs("rm")
def test_native_bypasses_builtin(native, sh, tmp_path):
    """native.rm spawns /bin/rm even though shell.rm is a builtin."""
    sh.touch("file.txt")
    res = native.rm(ExecutionResult(argv=[], exit_code=0, stdout="file.txt", stderr=""))
    assert res.argv == ["rm", "file.txt"]
    assert res.exit_code == 0
    assert not (tmp_path / "file.txt").exists()


@needs("git")
def test_subcommands(native, tmp_path):
    assert native.git.init("-q").exit_code == 0
    ret = native.git.status()
    assert ret.exit_code == 0
    assert ret.stderr == ""


@needs("git")
def test_subcommands_with_options(native, tmp_path):
    native.git.init("-q")
    (tmp_path / "package.json").write_text("{}\n")
    assert native.git.add("package.json").exit_code == 0

    # Dry run only: the file must survive.
    ret = native.git.rm("-qrnf", "package.json")
    assert ret.exit_code == 0
    assert ret.stdout == ""
    assert ret.stderr == ""
    assert (tmp_path / "package.json").exists()


@needs("rm")
def test_unsafe_filenames(native, sh, tmp_path):
    for name in ["a.txt", "b.txt", "a.txt;b.txt"]:
        sh.exec("echo hello world").to(tmp_path / name)

    native.rm("a.txt;b.txt")
    assert not (tmp_path / "a.txt;b.txt").exists()
    assert str(sh.cat("a.txt")) == "hello world\n"
    assert (tmp_path / "a.txt").exists()
    assert (tmp_path / "b.txt").exists()


@needs("rm")
def test_avoids_globs(native, sh, tmp_path):
    sh.exec("echo hello world").to(tmp_path / "a.txt")
    sh.exec("echo hello world").to(tmp_path / "*.txt")

    native.rm("*.txt")
    assert not (tmp_path / "*.txt").exists()
    assert str(sh.cat("a.txt")) == "hello world\n"


@needs("rm")
def test_escapes_quotes(native, sh, tmp_path):
    fquote = 'thisHas"Quotes.txt'
    sh.exec("echo hello world").to(tmp_path / fquote)
    assert (tmp_path / fquote).exists()
    native.rm(fquote)
    assert not (tmp_path / fquote).exists()


@needs("echo")
def test_no_command_substitution(native, tmp_path):
    res = native.echo("$(touch pwned)", "`touch pwned2`")
    assert res.stdout == "$(touch pwned) `touch pwned2`\n"
    assert not (tmp_path / "pwned").exists()
    assert not (tmp_path / "pwned2").exists()
