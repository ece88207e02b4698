from __future__ import annotations

from utils.string_utils import StringUtils


def test_ensure_str() -> None:
    assert StringUtils.ensure_str(None) == ""
    assert StringUtils.ensure_str(12) == "12"  # type: ignore[arg-type]
    assert StringUtils.ensure_str(" keep ") == " keep "


def test_remove_url() -> None:
    assert StringUtils.remove_url("see https://example.com/a?b=1 and http://x.org") == "see  and "


def test_remove_emoji_codes() -> None:
    assert StringUtils.remove_emoji_codes("hi :wave: there :blob_happy:") == "hi  there "


def test_remove_timestamps_keeps_author() -> None:
    text: str = "alice — Today at 9:15 PM\nhello\nbob — 03/14/2025 11:02 AM\nbye"

    assert StringUtils.remove_timestamps(text) == "alice:\nhello\nbob:\nbye"


def test_collapse_newlines() -> None:
    assert StringUtils.collapse_newlines("a\n\n\n\nb\n\nc") == "a\n\nb\n\nc"


def test_generate_memory_key_lowercases_text_only() -> None:
    assert StringUtils.generate_memory_key("Hello World", "korean") == "hello world_korean"
    assert StringUtils.generate_memory_key("안녕", "korean") == "안녕_korean"
