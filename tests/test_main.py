import main


def _write_resources(root):
    people_dir = root / "people"
    people_dir.mkdir(parents=True)
    (people_dir / "people.txt").write_text(
        "Principal Investigator:\nYan Lu\nAlumni:\nOld Member\n", encoding="utf-8"
    )
    (people_dir / "Yan_Lu").mkdir()
    (people_dir / "Yan_Lu" / "intro.txt").write_text("Position:\nProfessor\nEmail:\nyan@example.org\n", encoding="utf-8")

    pub_dir = root / "pub"
    pub_dir.mkdir()
    (pub_dir / "ExPub.txt").write_text(
        "@article{k1, author={Song, Fei and Zhang, Ying}, title={A Study}, journal={J. Test}, year={2020}}\n"
        "@inproceedings{c1, author={Yan Lu}, title={Graphs}, booktitle={Proc. Conf}, year={2018}}\n",
        encoding="utf-8",
    )


def test_main_renders_both_pages(tmp_path):
    """
    A full run writes both pages and exits with 0.
    """
    resources = tmp_path / "Resources"
    out = tmp_path / "out"
    _write_resources(resources)

    code = main.main(["--resources", str(resources), "--out", str(out), "--sort", "year-asc"])
    assert code == 0

    people_html = (out / "people.html").read_text(encoding="utf-8")
    assert "Yan Lu" in people_html and "Professor" in people_html
    assert "../Resources/people/Yan_Lu/photo.jpg" in people_html
    assert 'src="../Resources/icons/email.svg"' in people_html

    pub_html = (out / "publications.html").read_text(encoding="utf-8")
    assert "Loaded 2 entries from ExPub.txt." in pub_html
    assert "<em>J. Test</em>" in pub_html
    assert "in <em>Proc. Conf</em>" in pub_html


def test_main_only_publications_with_filter(tmp_path):
    resources = tmp_path / "Resources"
    out = tmp_path / "out"
    _write_resources(resources)

    code = main.main(["--resources", str(resources), "--out", str(out), "--only", "publications",
                      "--filter", "nomatch"])
    assert code == 0
    assert not (out / "people.html").exists()
    assert 'id="empty-hint"' in (out / "publications.html").read_text(encoding="utf-8")


def test_main_missing_sources(tmp_path):
    """
    A missing roster skips the people page; a missing publication file still
    writes a page whose status reports the failure. Both return 1.
    """
    out = tmp_path / "out"
    code = main.main(["--resources", str(tmp_path / "nowhere"), "--out", str(out)])
    assert code == 1
    assert not (out / "people.html").exists()
    pub_html = (out / "publications.html").read_text(encoding="utf-8")
    assert "Failed to load ExPub.txt:" in pub_html
    assert "pub-item" not in pub_html


def test_main_publications_failure_page(tmp_path):
    resources = tmp_path / "Resources"
    resources.mkdir()
    out = tmp_path / "out"
    code = main.main(["--resources", str(resources), "--out", str(out), "--only", "publications"])
    assert code == 1
    assert "Failed to load ExPub.txt:" in (out / "publications.html").read_text(encoding="utf-8")


def test_main_log_file(tmp_path):
    resources = tmp_path / "Resources"
    _write_resources(resources)
    log_path = tmp_path / "logs" / "run.log"

    code = main.main(["--resources", str(resources), "--out", str(tmp_path / "out"),
                      "--only", "people", "--log-file", str(log_path)])
    assert code == 0
    log_text = log_path.read_text(encoding="utf-8")
    assert "[People]" in log_text
    assert "Roster parsed: 2 person(s)" in log_text
