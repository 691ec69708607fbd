from bundledupes.models import Internal, Leaf
from bundledupes.stages.flatten import flatten, parse_nodes


def test_parse_nodes_tags_variants():
    nodes = parse_nodes([
        {"label": "main.js", "path": "./ignored.js", "parsedSize": 99, "groups": [{"path": "./a.js", "parsedSize": 5}]},
        {"path": "./b.js", "statSize": 7},
        {"label": "empty"},
        {"label": "empty groups", "groups": []},
    ])
    assert len(nodes) == 2
    assert isinstance(nodes[0], Internal)
    assert nodes[0].children == [Leaf(path="./a.js", size=5)]
    assert nodes[1] == Leaf(path="./b.js", size=7)


def test_flatten_depth_first_order():
    raw = [
        {"groups": [
            {"groups": [{"path": "./a.js", "parsedSize": 1}, {"path": "./b.js", "parsedSize": 2}]},
            {"path": "./c.js", "parsedSize": 3},
        ]},
        {"path": "./d.js", "parsedSize": 4},
    ]
    out = flatten(parse_nodes(raw))
    assert [e.path for e in out] == ["./a.js", "./b.js", "./c.js", "./d.js"]
    assert sum(e.size for e in out) == 10


def test_flatten_size_fallbacks():
    raw = [
        {"path": "./style.css", "statSize": 40},
        {"path": "./zero.js", "parsedSize": 0, "statSize": 12},
        {"path": "./nosize.js"},
    ]
    sizes = {e.path: e.size for e in flatten(parse_nodes(raw))}
    assert sizes == {"./style.css": 40, "./zero.js": 0, "./nosize.js": 0}


def test_flatten_empty():
    assert flatten(parse_nodes([])) == []
