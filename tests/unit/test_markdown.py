from tvog.modules.messages.markdown import split_segments


def test_plain_text_is_single_segment() -> None:
    segments = split_segments("Just text\nover lines")
    assert [s.type for s in segments] == ["text"]
    assert segments[0].content == "Just text\nover lines"


def test_empty_content() -> None:
    segments = split_segments("")
    assert len(segments) == 1
    assert segments[0].type == "text"
    assert segments[0].content == ""


def test_code_blocks_are_extracted_in_order() -> None:
    content = "Intro\n```python\nprint('hi')\n```\nmiddle\n```\nraw\n```"
    segments = split_segments(content)

    assert [s.type for s in segments] == ["text", "code", "text", "code"]
    assert segments[0].content == "Intro\n"
    assert segments[1].language == "python"
    assert segments[1].content == "print('hi')\n"
    assert segments[2].content == "\nmiddle\n"
    assert segments[3].language == "code"
    assert segments[3].content == "raw\n"


def test_unterminated_fence_stays_text() -> None:
    content = "Look:\n```js\nconsole.log(1)"
    segments = split_segments(content)
    assert [s.type for s in segments] == ["text"]
    assert segments[0].content == content


def test_images_inside_text() -> None:
    content = "Here you go ![a cat](data:image/png;base64,AAA) enjoy"
    segments = split_segments(content)

    assert [s.type for s in segments] == ["text", "image", "text"]
    assert segments[1].alt == "a cat"
    assert segments[1].url == "data:image/png;base64,AAA"
    assert segments[2].content == " enjoy"


def test_image_syntax_inside_code_is_not_an_image() -> None:
    content = "```md\n![x](y.png)\n```"
    segments = split_segments(content)
    assert [s.type for s in segments] == ["code"]
    assert segments[0].content == "![x](y.png)\n"
