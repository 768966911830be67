from nntpkit.parsers import (
    parse_articlelist,
    parse_description,
    parse_fieldlist,
    parse_grouplist,
)


def test_parse_grouplist() -> None:
    lines = ["alt.test 0000000100 0000000001 y\n"]
    assert parse_grouplist(lines) == {"alt.test": (100, 1, "y")}


def test_parse_grouplist_multiple() -> None:
    lines = [
        "local.general 0000000010 0000000001 y\n",
        "local.test\t5 1 m\n",
        "junk 0 1 n\n",
    ]
    assert parse_grouplist(lines) == {
        "local.general": (10, 1, "y"),
        "local.test": (5, 1, "m"),
        "junk": (0, 1, "n"),
    }


def test_parse_grouplist_passes_values_through() -> None:
    lines = [
        "control.cancel 1641048001 news@example.com\n",
        "odd.group x y z extra\n",
        "\n",
    ]
    assert parse_grouplist(lines) == {
        "control.cancel": (1641048001, "news@example.com", None),
        "odd.group": ("x", "y", "z"),
    }


def test_parse_grouplist_empty() -> None:
    assert parse_grouplist([]) == {}


def test_parse_fieldlist() -> None:
    lines = [
        "1\tHello\tJohn Doe <jd@example.com>\tSat, 01 Jan 2022 14:40:01 GMT"
        "\t<1@example.com>\t\t120\t4\n",
        "2\tRe: Hello\tjane@example.com\t\t<2@example.com>\t<1@example.com>\t80\t2\n",
    ]
    assert parse_fieldlist(lines) == {
        1: [
            "Hello",
            "John Doe <jd@example.com>",
            "Sat, 01 Jan 2022 14:40:01 GMT",
            "<1@example.com>",
            "",
            "120",
            "4",
        ],
        2: [
            "Re: Hello",
            "jane@example.com",
            "",
            "<2@example.com>",
            "<1@example.com>",
            "80",
            "2",
        ],
    }


def test_parse_fieldlist_field_names() -> None:
    lines = ["Subject:\tfull\n", "\n"]
    assert parse_fieldlist(lines) == {"Subject:": ["full"]}


def test_parse_articlelist() -> None:
    lines = ["<1@example.com>\n", "<2@example.com>\r\n", "Subject:\n", "\n"]
    assert parse_articlelist(lines) == [
        "<1@example.com>",
        "<2@example.com>",
        "Subject:",
        "",
    ]


def test_parse_articlelist_keeps_order() -> None:
    lines = [f"{n}\n" for n in (30, 10, 20)]
    assert parse_articlelist(lines) == ["30", "10", "20"]


def test_parse_description() -> None:
    lines = ["comp.lang.perl.misc\tDiscussion of Perl.\n"]
    assert parse_description(lines) == {
        "comp.lang.perl.misc": "comp.lang.perl.misc\tDiscussion of Perl.",
    }


def test_parse_description_skips_blank_lines() -> None:
    lines = [
        "local.test Local test group\n",
        "\n",
        "   \n",
        "  local.general Local general group\n",
        "junk\n",
    ]
    assert parse_description(lines) == {
        "local.test": "local.test Local test group",
        "local.general": "  local.general Local general group",
        "junk": "junk",
    }
