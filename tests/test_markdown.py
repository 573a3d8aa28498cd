"""Tests for Markdown body inspection helpers."""

from mdx_catalog.markdown import (
    find_code_blocks,
    find_headings,
    reading_time,
    strip_code,
    word_count,
)


BODY = """Intro paragraph.

```vue
<template><div /></template>
```

~~~
plain text block
~~~
"""


def test_find_code_blocks_reports_languages_and_lines():
    blocks = find_code_blocks(BODY, first_line=6)

    assert [block.language for block in blocks] == ["vue", None]
    assert (blocks[0].start_line, blocks[0].end_line) == (8, 10)
    assert (blocks[1].start_line, blocks[1].end_line) == (12, 14)
    assert blocks[0].code == "<template><div /></template>"


def test_info_string_first_word_is_language():
    blocks = find_code_blocks("```java title=Portlet.java\nclass A {}\n```\n")

    assert blocks[0].language == "java"


def test_unterminated_fence_has_no_end_line():
    blocks = find_code_blocks("Text\n```js\nconst a = 1;\n", first_line=5)

    assert len(blocks) == 1
    assert blocks[0].end_line is None
    assert not blocks[0].terminated
    assert blocks[0].start_line == 6


def test_fence_only_closes_with_same_marker():
    body = "~~~\n```\nstill code\n~~~\n"

    blocks = find_code_blocks(body)

    assert len(blocks) == 1
    assert blocks[0].code == "```\nstill code"
    assert blocks[0].terminated


def test_closing_fence_must_be_at_least_as_long():
    body = "````md\n```\nnested\n```\n````\n"

    blocks = find_code_blocks(body)

    assert len(blocks) == 1
    assert blocks[0].end_line == 5


def test_fence_with_info_string_does_not_close():
    blocks = find_code_blocks("```\ncode\n```python\n")

    assert len(blocks) == 1
    assert not blocks[0].terminated


def test_find_headings_skips_code():
    body = "# Title\n\n```bash\n# not a heading\n```\n\n## Setup ##\n"

    headings = find_headings(body, first_line=3)

    assert [(h.level, h.text, h.line) for h in headings] == [(1, "Title", 3), (2, "Setup", 9)]


def test_word_count_excludes_code():
    assert strip_code(BODY).strip() == "Intro paragraph."
    assert word_count(BODY) == 2


def test_reading_time_rounds_up():
    body = " ".join(["word"] * 201)

    assert reading_time(body, words_per_minute=200) == 2
    assert reading_time("short", words_per_minute=200) == 1
    assert reading_time("```js\nconst a = 1;\n```\n") == 1
    assert reading_time("  \n") == 0
