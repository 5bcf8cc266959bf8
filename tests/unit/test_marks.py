import asyncio

from domhand.dom.classification import MARK_ATTR, MARK_STYLE_ID
from domhand.dom.service import DomService
from fake_page import HIDDEN_RECT, FakeBridge, node


def page_with_buttons(visible: int, hidden: int = 0):
    children = []
    for i in range(visible):
        children.append(node('button', {'id': f'b{i + 1}'}, text=f'Button {i + 1}'))
        if i < hidden:
            children.append(node('button', {'id': f'h{i + 1}'}, text='hidden', rect=HIDDEN_RECT))
    children.append(node('p', None, text='not interactive'))
    return FakeBridge(node('body', None, *children))


def marked(bridge):
    return [n for n in bridge.document.iter() if MARK_ATTR in n.attributes]


def test_marks_follow_document_order():
    bridge = page_with_buttons(visible=5, hidden=3)
    service = DomService(bridge)
    registry = asyncio.run(service.apply_marks())

    assert len(registry) == 5
    nodes = marked(bridge)
    assert [n.attributes[MARK_ATTR] for n in nodes] == ['1', '2', '3', '4', '5']
    assert [n.attributes['id'] for n in nodes] == ['b1', 'b2', 'b3', 'b4', 'b5']
    for i in range(1, 6):
        assert registry.get(i) is bridge.find(f'#b{i}')
        assert registry.descriptors[str(i)].mark == str(i)


def test_payload_shape():
    bridge = page_with_buttons(visible=2)
    registry = asyncio.run(DomService(bridge).apply_marks())
    payload = registry.to_payload()
    assert payload['count'] == 2
    assert payload['marks']['1']['label'] == 'Button 1'
    assert payload['marks']['2']['tag'] == 'BUTTON'


def test_reapplying_replaces_the_registry():
    bridge = page_with_buttons(visible=3)
    service = DomService(bridge)
    first = asyncio.run(service.apply_marks())

    bridge.find('#b2').rect = HIDDEN_RECT
    second = asyncio.run(service.apply_marks())

    assert not first.valid
    assert len(second) == 2
    assert bridge.find('#b2').attributes.get(MARK_ATTR) is None
    assert bridge.find('#b3').attributes[MARK_ATTR] == '2'


def test_clear_removes_every_mark():
    bridge = page_with_buttons(visible=4)
    service = DomService(bridge)
    registry = asyncio.run(service.apply_marks())

    cleared = asyncio.run(service.clear_marks())

    assert cleared == 4
    assert marked(bridge) == []
    assert not registry.valid
    assert len(registry) == 0
    assert registry.to_payload() == {'count': 0, 'marks': {}}


def test_clear_on_unmarked_page():
    service = DomService(page_with_buttons(visible=2))
    assert asyncio.run(service.clear_marks()) == 0


def test_styles_injected_once_per_document():
    bridge = page_with_buttons(visible=1)
    service = DomService(bridge)
    asyncio.run(service.apply_marks())
    asyncio.run(service.apply_marks())
    assert list(bridge.stylesheets) == [MARK_STYLE_ID]
    assert MARK_ATTR in bridge.stylesheets[MARK_STYLE_ID]


def test_new_document_discards_marks():
    bridge = page_with_buttons(visible=2)
    service = DomService(bridge)
    registry = asyncio.run(service.apply_marks())

    bridge.load(node('body', None, node('a', {'href': '/next'}, text='Next')))
    state = asyncio.run(service.document_state())

    assert not registry.valid
    assert state.registry is None
    assert state.styles_injected is False

    fresh = asyncio.run(service.apply_marks())
    assert len(fresh) == 1
    assert MARK_STYLE_ID in bridge.stylesheets


def test_candidates_include_roles_editables_and_tabindex():
    bridge = FakeBridge(
        node(
            'body',
            None,
            node('div', {'role': 'button'}, text='Role button'),
            node('div', {'contenteditable': 'true'}, text='Editor'),
            node('span', {'tabindex': '0'}, text='Focusable'),
            node('div', {'role': 'note'}, text='Note'),
        )
    )
    registry = asyncio.run(DomService(bridge).apply_marks())
    labels = [d.label for d in registry.descriptors.values()]
    assert labels == ['Role button', 'Editor', 'Focusable']


def test_marks_scoped_to_a_subtree():
    inner = node('div', {'id': 'panel'}, node('button', None, text='In'))
    bridge = FakeBridge(node('body', None, node('button', None, text='Out'), inner))
    service = DomService(bridge)
    registry = asyncio.run(service.apply_marks(root=inner))
    assert len(registry) == 1
    assert registry.descriptors['1'].label == 'In'
