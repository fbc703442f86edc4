# -*- coding: utf-8 -*-
import pytest

from promptplayground.app.cli import build_parser, main
from promptplayground.config.settings import Backend
from promptplayground.prompts.constants import SAMPLE_YAML_PROMPT


def test_generate_sample_command(tmp_path, capsys):
    assert main(["--quiet", "generate-sample", "exp1", "--dest", str(tmp_path)]) == 0
    assert (tmp_path / "exp1.yaml").read_text(encoding="utf-8") == SAMPLE_YAML_PROMPT
    assert "completed successfully" in capsys.readouterr().out


def test_generate_sample_twice_fails(tmp_path, capsys):
    main(["--quiet", "generate-sample", "exp1", "--dest", str(tmp_path)])
    assert main(["--quiet", "generate-sample", "exp1", "--dest", str(tmp_path)]) == 1
    assert "already exists" in capsys.readouterr().err


def test_send_without_file_fails(tmp_path, capsys):
    assert main(["--quiet", "send-source", "--workspace", str(tmp_path)]) == 1
    assert "No active editor detected" in capsys.readouterr().err


def test_backend_option_is_parsed():
    args = build_parser().parse_args(["send-raw", "x.txt", "--backend", "openai", "--stream"])
    assert args.backend is Backend.OPENAI
    assert args.stream


def test_unknown_backend_option_exits():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["send-raw", "x.txt", "--backend", "nope"])
