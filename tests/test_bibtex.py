from textwrap import dedent

from labsite import bibtex_utils as bt
from labsite.models import PublicationEntry

SAMPLE_BIB = dedent(r"""
    @article{k1, author={Song, Fei and Zhang, Ying}, title={A Study}, journal={J. Test}, year={2020}, volume={5}, pages={10--20}}

    @inproceedings{Lu2021,
      title = {Fast Parsing at 100\% Accuracy},
      author = {Yan Lu and Fei Song},
      booktitle = {Proc. of the Test Conference},
      organization = {IEEE},
      year = {2021}
    }

    @MISC{note3,
      title = {A Technical Note},
      publisher = {Lab Press}
    }
""").strip()

# ===== ENTRY EXTRACTION =====

def test_entry_count_and_order():
    """
    Every top-level @TYPE{ entry is recovered, in source order.
    """
    entries = bt.parse_bibtex(SAMPLE_BIB)
    assert [e.key for e in entries] == ["k1", "Lu2021", "note3"], f"Unexpected keys {[e.key for e in entries]}"
    assert [e.type for e in entries] == ["article", "inproceedings", "misc"]

def test_field_extraction():
    """
    Field names are lowercased, values trimmed, and backslash-percent unescaped.
    """
    entries = bt.parse_bibtex(SAMPLE_BIB)
    conf = entries[1]
    assert conf.fields == {
        "title": "Fast Parsing at 100% Accuracy",
        "author": "Yan Lu and Fei Song",
        "booktitle": "Proc. of the Test Conference",
        "organization": "IEEE",
        "year": "2021",
    }
    assert conf.raw_authors == "Yan Lu and Fei Song"
    assert conf.year == 2021

def test_uppercase_field_names():
    text = "@Article{X1, TITLE = {Upper}, Journal = {J}}"
    entry = bt.parse_bibtex(text)[0]
    assert entry.type == "article"
    assert entry.fields == {"title": "Upper", "journal": "J"}

def test_duplicate_field_last_wins():
    """
    A repeated field name keeps the value of its last occurrence.
    """
    entry = bt.parse_bibtex("@misc{d, title={First}, title={Second}}")[0]
    assert entry.title == "Second"

def test_missing_author_and_year():
    entry = bt.parse_bibtex(SAMPLE_BIB)[2]
    assert entry.raw_authors == ""
    assert entry.year is None

def test_year_parsing():
    """
    Years keep their leading integer; anything else stays as written.
    """
    test_cases = [
        ("2020", 2020),
        ("2021a", 2021),
        ("forthcoming", "forthcoming"),
        ("２０２０", "２０２０"),
        ("", ""),
        (None, None),
    ]

    for input_val, expected in test_cases:
        output = bt.parse_year(input_val)
        assert output == expected, f"Expected {expected!r}, got {output!r}"

def test_fullwidth_year_kept_as_text():
    entry = bt.parse_bibtex("@misc{a, year={２０２０}}")[0]
    assert entry.year == "２０２０"

def test_nested_braces_truncate_value():
    """
    Values stop at the first closing brace; nested braces are not balanced.
    """
    entry = bt.parse_bibtex("@article{n1, title={The {RNA} World}, year={2019}}")[0]
    assert entry.title == "The {RNA"
    assert entry.year == 2019

def test_malformed_input_never_raises():
    test_cases = ["", "no entries here", "@article{broken", "@{nokey, title={x}}", None]
    for input_val in test_cases:
        assert bt.parse_bibtex(input_val) == [], f"Expected no entries for {input_val!r}"

def test_entry_body_may_contain_at_sign():
    text = "@misc{m1, note={mail me at lab@example.org}, year={2018}}"
    entries = bt.parse_bibtex(text)
    assert len(entries) == 1
    assert entries[0].get("note") == "mail me at lab@example.org"

def test_idempotent_parsing():
    assert bt.parse_bibtex(SAMPLE_BIB) == bt.parse_bibtex(SAMPLE_BIB)

# ===== CLASSIFICATION =====

def test_classification():
    """
    Journal and conference predicates are independent of each other.
    """
    test_cases = [
        (PublicationEntry(type="article", key="a"), True, False),
        (PublicationEntry(type="misc", key="b", fields={"journal": "J"}), True, False),
        (PublicationEntry(type="inproceedings", key="c"), False, True),
        (PublicationEntry(type="misc", key="d", fields={"booktitle": "Proc"}), False, True),
        (PublicationEntry(type="misc", key="e", fields={"journal": "J", "booktitle": "Proc"}), True, True),
        (PublicationEntry(type="book", key="f", fields={"publisher": "P"}), False, False),
        (PublicationEntry(type="misc", key="g", fields={"journal": ""}), False, False),
    ]

    for entry, journal, conference in test_cases:
        assert bt.is_journal(entry) == journal, f"is_journal mismatch for {entry.key}"
        assert bt.is_conference(entry) == conference, f"is_conference mismatch for {entry.key}"
