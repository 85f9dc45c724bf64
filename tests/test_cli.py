# tests/test_cli.py
import logging
import sys
from unittest.mock import MagicMock, patch

import pytest

from flatsrc.cli import create_arg_parser, main, output_exclude_pattern
from flatsrc.utils.tokenizer import Tokenizer

# --- Fixtures ---

@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("flatsrc")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)

@pytest.fixture
def sample_project(tmp_path):
    src_dir = tmp_path / "src"
    src_dir.mkdir()
    (src_dir / "main.go").write_text("package main\n\nfunc main() {}\n", encoding="utf-8")
    (src_dir / "util.go").write_text("package main\n\nfunc util() {}\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("# My Project\n", encoding="utf-8")

    hidden = tmp_path / ".cache"
    hidden.mkdir()
    (hidden / "generated.go").write_text("package cache\n", encoding="utf-8")
    return tmp_path

# --- Test 1: Argument parsing ---

def test_parser_defaults():
    args = create_arg_parser().parse_args(["--extension", "*.go"])
    assert args.max_input_tokens == 200000
    assert args.depth_limit == 10
    assert args.path == ""
    assert args.tokenizer == "heuristic"
    assert args.exclude == []
    assert args.debug is False

def test_missing_filters_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
    assert "Either a pattern or an extension filter is required" in capsys.readouterr().err

# --- Test 2: End-to-end runs ---

def test_end_to_end_run(sample_project, capsys):
    test_args = ["flatsrc", "--extension", "*.go", "--path", str(sample_project)]

    with patch.object(sys, "argv", test_args):
        main()

    captured = capsys.readouterr()
    assert "### src/main.go\n```\npackage main" in captured.out
    assert "### src/util.go" in captured.out
    assert "README.md" not in captured.out
    assert "generated.go" not in captured.out
    assert captured.err == ""

def test_debug_writes_summary_to_stderr(sample_project, capsys):
    main(["--extension", "*.go", "-p", str(sample_project), "-d"])

    captured = capsys.readouterr()
    assert "Files included: 2" in captured.err
    assert "Extension filter: *.go" in captured.err
    assert "Files included" not in captured.out
    assert "### src/main.go" in captured.out

def test_output_file(sample_project, tmp_path_factory, capsys):
    output_file = tmp_path_factory.mktemp("out") / "context.txt"
    main(["--pattern", "README", "-p", str(sample_project), "-o", str(output_file)])

    assert output_file.read_text(encoding="utf-8") == "### README.md\n```\n# My Project\n\n```\n"
    assert capsys.readouterr().out == ""

def test_exclude_option(sample_project, capsys):
    main(["--extension", "*.go", "-p", str(sample_project), "--exclude", "util.go"])

    out = capsys.readouterr().out
    assert "src/main.go" in out
    assert "src/util.go" not in out

def test_tiktoken_option(sample_project, capsys):
    fake_encoding = MagicMock()
    fake_encoding.encode.side_effect = lambda text: text.split()

    with patch.object(Tokenizer, "_encoding", fake_encoding):
        main(["--extension", "*.go", "-p", str(sample_project), "--tokenizer", "tiktoken", "-d"])

    captured = capsys.readouterr()
    assert "Files included: 2" in captured.err
    # 5 words per file
    assert "Tokens used (est.): 10 / 200000" in captured.err

# --- Test 3: Fatal errors ---

def test_no_match_exits_with_pattern(sample_project, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--pattern", "nothing_matches_this", "-p", str(sample_project)])

    assert exc_info.value.code == 1
    assert "nothing_matches_this" in capsys.readouterr().err

def test_invalid_pattern_exits(sample_project, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--pattern", "(", "-p", str(sample_project)])

    assert exc_info.value.code == 1
    assert "Invalid pattern" in capsys.readouterr().err

def test_missing_directory_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--extension", "*.go", "-p", str(tmp_path / "missing")])

    assert exc_info.value.code == 1
    assert "Error walking" in capsys.readouterr().err

def test_output_inside_root_is_not_read_back(tmp_path, capsys):
    (tmp_path / "notes.txt").write_text("first note\n", encoding="utf-8")
    output_file = tmp_path / "ctx.txt"
    args = ["--extension", "*.txt", "-p", str(tmp_path), "-o", str(output_file)]

    main(args)
    first = output_file.read_text(encoding="utf-8")
    main(args)
    second = output_file.read_text(encoding="utf-8")

    assert first == second
    assert "### ctx.txt" not in second
    assert "### notes.txt" in second

def test_output_exclude_pattern(tmp_path):
    assert output_exclude_pattern(str(tmp_path / "out" / "ctx[1].txt"), tmp_path) == "/out/ctx\\[1\\].txt"
    assert output_exclude_pattern(str(tmp_path.parent / "elsewhere.txt"), tmp_path) is None
