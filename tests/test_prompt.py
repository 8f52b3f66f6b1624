import io

import pytest

from conftest import output
from create_devx.cancel import CancelToken
from create_devx.prompt import ask_project_path


class _Interrupting(io.StringIO):
    def readline(self, *args):
        raise KeyboardInterrupt


def test_returns_valid_answer(console) -> None:
    assert ask_project_path(console, stream=io.StringIO("my-api\n")) == "my-api"
    assert "What is your project named?" in output(console)


def test_blank_answer_uses_default(console) -> None:
    assert ask_project_path(console, stream=io.StringIO("\n")) == "backend"


def test_invalid_answer_is_asked_again(console) -> None:
    answer = ask_project_path(console, stream=io.StringIO("My App\nmy-app\n"))
    assert answer == "my-app"
    assert "Invalid project name: " in output(console)


def test_interrupt_restores_cursor_and_exits(console) -> None:
    with pytest.raises(SystemExit) as e:
        ask_project_path(console, stream=_Interrupting())
    assert e.value.code == 1
    assert "\x1b[?25h" in output(console)


def test_cancelled_token_exits_before_prompting(console) -> None:
    token = CancelToken()
    token.cancel("SIGTERM")
    with pytest.raises(SystemExit) as e:
        ask_project_path(console, stream=io.StringIO("my-api\n"), cancel=token)
    assert e.value.code == 1
    assert "What is your project named?" not in output(console)


def test_relative_answer_is_checked_against_given_cwd(tmp_path, console) -> None:
    project = tmp_path / "my-api"
    project.mkdir()
    assert ask_project_path(console, cwd=project, stream=io.StringIO(".\n")) == "."

    bad = tmp_path / "My App"
    bad.mkdir()
    answer = ask_project_path(console, cwd=bad, stream=io.StringIO(".\napi\n"))
    assert answer == "api"
    assert "Invalid project name: " in output(console)
