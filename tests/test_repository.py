import json

import pytest

from linkstatus.repository import (
    HASH_TO_LINK_NUM_FILE,
    LINK_NUM_TO_LINKS_FILE,
    LinkRepository,
    hash_links,
)


@pytest.mark.parametrize("links", [[], ["aaa.com", "bbb.ru"]])
def test_store_links(tmp_path, links):
    repo = LinkRepository(tmp_path)
    repo.store_links(list(links), 1)
    assert repo.get_links_by_link_num(1) == links


def test_store_links_sorts(tmp_path):
    repo = LinkRepository(tmp_path)
    repo.store_links(["bbb.ru", "aaa.com"], 3)
    assert repo.get_links_by_link_num(3) == ["aaa.com", "bbb.ru"]


def test_unknown_link_num_is_empty(tmp_path):
    assert LinkRepository(tmp_path).get_links_by_link_num(42) == []


def test_hash_links_known_values():
    assert hash_links([]) == 0xCBF29CE484222325
    assert hash_links(["a"]) == 0xAF63DC4C8601EC8C


def test_hash_links_concatenates():
    assert hash_links(["ab", "c"]) == hash_links(["a", "bc"])


def test_get_link_num_assigns_and_reuses(tmp_path):
    repo = LinkRepository(tmp_path)
    assert repo.get_link_num(["bbb.com", "aaa.com"]) == (1, True)
    assert repo.get_link_num(["aaa.com", "bbb.com"]) == (1, False)
    assert repo.get_link_num(["ccc.com"]) == (2, True)


def test_get_link_num_sorts_input(tmp_path):
    links = ["ccc.com", "aaa.com"]
    LinkRepository(tmp_path).get_link_num(links)
    assert links == ["aaa.com", "ccc.com"]


def test_persist_round_trip(tmp_path):
    repo = LinkRepository(tmp_path)
    first = ["aaa.com", "bbb.ru"]
    second = ["ccc.com"]
    for links in (first, second):
        num, _ = repo.get_link_num(links)
        repo.store_links(links, num)
    repo.store_data_to_json()

    stored = json.loads((tmp_path / LINK_NUM_TO_LINKS_FILE).read_text())
    assert stored == {"1": ["aaa.com", "bbb.ru"], "2": ["ccc.com"]}

    loaded = LinkRepository(tmp_path)
    loaded.load_data_from_json()
    assert loaded.get_links_by_link_num(1) == first
    assert loaded.get_links_by_link_num(2) == second
    assert loaded.get_link_num(["bbb.ru", "aaa.com"]) == (1, False)
    assert loaded.get_link_num(["ddd.com"]) == (3, True)


def test_hash_file_contents(tmp_path):
    repo = LinkRepository(tmp_path)
    repo.get_link_num(["a"])
    repo.store_data_to_json()
    stored = json.loads((tmp_path / HASH_TO_LINK_NUM_FILE).read_text())
    assert stored == {str(0xAF63DC4C8601EC8C): 1}


def test_store_creates_directory(tmp_path):
    target = tmp_path / "nested" / "data"
    LinkRepository(target).store_data_to_json()
    assert json.loads((target / HASH_TO_LINK_NUM_FILE).read_text()) == {}


def test_load_missing_files(tmp_path):
    repo = LinkRepository(tmp_path / "absent")
    repo.load_data_from_json()
    assert repo.get_link_num(["aaa.com"]) == (1, True)


def test_load_invalid_json(tmp_path):
    (tmp_path / HASH_TO_LINK_NUM_FILE).write_text("{not json")
    with pytest.raises(ValueError, match="hash_to_link_num"):
        LinkRepository(tmp_path).load_data_from_json()


def test_load_invalid_link_sets(tmp_path):
    (tmp_path / LINK_NUM_TO_LINKS_FILE).write_text('{"x": ["a"]}')
    with pytest.raises(ValueError, match="link_num_to_links"):
        LinkRepository(tmp_path).load_data_from_json()