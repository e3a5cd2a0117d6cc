from neuronote.graph.backlinks import BacklinkIndex
from neuronote.graph.topology import GraphEdge, GraphNode, GraphTopologyEngine, fingerprint


def test_unchanged_notes_return_the_same_object(make_note):
    notes = [make_note("A", "[[B]]"), make_note("B")]
    engine = GraphTopologyEngine()

    first = engine.recompute(notes)
    assert engine.recompute(list(notes)) is first


def test_body_edits_keep_identity(make_note):
    engine = GraphTopologyEngine()
    first = engine.recompute([make_note("A", "[[B]] draft"), make_note("B")])
    second = engine.recompute([make_note("A", "[[B]] final wording"), make_note("B")])
    assert second is first


def test_link_changes_produce_a_new_topology(make_note):
    engine = GraphTopologyEngine()
    first = engine.recompute([make_note("A", "[[B]]"), make_note("B")])
    second = engine.recompute([make_note("A", ""), make_note("B")])
    assert second is not first
    assert second.edges == ()


def test_edges_resolve_by_exact_title(make_note):
    a, b = make_note("A", "see [[B]] and [[Nonexistent]] and [[b]]"), make_note("B")
    topology = GraphTopologyEngine().recompute([a, b])

    assert topology.nodes == (GraphNode(a.id, "A"), GraphNode(b.id, "B"))
    assert topology.edges == (GraphEdge(a.id, b.id),)


def test_repeated_links_give_one_edge(make_note):
    source = make_note("Log", "See [[Earth]] and [[Moon]] and [[Earth]] again")
    earth, moon = make_note("Earth"), make_note("Moon")
    topology = GraphTopologyEngine().recompute([source, earth, moon])

    assert topology.edges == (GraphEdge(source.id, earth.id), GraphEdge(source.id, moon.id))


def test_self_links_are_ignored(make_note):
    topology = GraphTopologyEngine().recompute([make_note("A", "[[A]]")])
    assert topology.edges == ()


def test_duplicate_titles_resolve_to_the_first_note(make_note):
    src = make_note("Src", "[[Twin]]")
    first, second = make_note("Twin", note_id="t1"), make_note("Twin", note_id="t2")
    topology = GraphTopologyEngine().recompute([src, first, second])
    assert topology.edges == (GraphEdge(src.id, "t1"),)


def test_fingerprint_ignores_link_order(make_note):
    assert fingerprint([make_note("A", "[[X]] [[Y]]")]) == fingerprint([make_note("A", "[[Y]] text [[X]]")])


def test_payload(make_note):
    a, b = make_note("A", "[[B]]"), make_note("B")
    payload = GraphTopologyEngine().recompute([a, b]).to_payload()
    assert payload == {
        "nodes": [{"id": a.id, "title": "A"}, {"id": b.id, "title": "B"}],
        "edges": [{"source": a.id, "target": b.id}],
    }


def test_backlinks(make_note):
    a, b = make_note("A", "links to [[B]]"), make_note("B")
    assert BacklinkIndex.for_active_note(b, [a, b]) == [a]
    assert BacklinkIndex.for_active_note(a, [a, b]) == []
    assert BacklinkIndex.for_active_note(None, [a, b]) == []
