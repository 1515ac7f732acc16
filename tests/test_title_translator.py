"""Tests for batched title translation."""

import asyncio

import pytest
from conftest import FakeBackend, make_item

from src.feeds.errors import TranslationFailure
from src.feeds.translator import TitleTranslator, annotate_title, build_batch


class ListBackend:
    def __init__(self, result: list[str]) -> None:
        self.result = result

    async def translate_batch(self, texts: list[str], target_language: str) -> list[str]:
        return self.result


def test_build_batch_preserves_order():
    items = [make_item("A"), make_item("B"), make_item("C")]
    assert build_batch(items) == [(0, "A"), (1, "B"), (2, "C")]


def test_annotate_title():
    assert annotate_title("X", "A") == "X (A)"


async def test_translates_with_original_in_parentheses():
    items = [make_item("A"), make_item("B")]
    translated = await TitleTranslator(ListBackend(["X", "Y"])).translate(items, "ja")

    assert [i.title for i in translated] == ["X (A)", "Y (B)"]
    assert [i.link for i in translated] == ["https://example.com/A", "https://example.com/B"]


async def test_single_backend_call_with_all_titles(fake_backend: FakeBackend):
    items = [make_item(name) for name in ("one", "two", "three")]
    await TitleTranslator(fake_backend).translate(items, "de")

    assert fake_backend.calls == [(["one", "two", "three"], "de")]


async def test_no_items_means_no_call(fake_backend: FakeBackend):
    assert await TitleTranslator(fake_backend).translate([], "ja") == []
    assert fake_backend.calls == []


async def test_backend_failure_leaves_titles_untouched():
    items = [make_item("A"), make_item("B")]
    backend = FakeBackend(fail_with=RuntimeError("quota exceeded"))

    with pytest.raises(TranslationFailure):
        await TitleTranslator(backend).translate(items, "ja")

    assert [i.title for i in items] == ["A", "B"]


async def test_translation_failure_passes_through():
    backend = FakeBackend(fail_with=TranslationFailure("auth"))

    with pytest.raises(TranslationFailure, match="auth"):
        await TitleTranslator(backend).translate([make_item("A")], "ja")


@pytest.mark.parametrize("result", [["X"], ["X", "Y", "Z"], []])
async def test_misaligned_response_fails_whole_batch(result):
    items = [make_item("A"), make_item("B")]

    with pytest.raises(TranslationFailure, match="misaligned"):
        await TitleTranslator(ListBackend(result)).translate(items, "ja")

    assert [i.title for i in items] == ["A", "B"]


async def test_input_items_are_not_mutated_on_success():
    items = [make_item("A")]
    translated = await TitleTranslator(ListBackend(["X"])).translate(items, "ja")

    assert items[0].title == "A"
    assert translated[0].title == "X (A)"


async def test_cancellation_is_not_wrapped():
    class SlowBackend:
        async def translate_batch(self, texts, target_language):
            await asyncio.sleep(10)
            return texts

    task = asyncio.create_task(TitleTranslator(SlowBackend()).translate([make_item("A")], "ja"))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
