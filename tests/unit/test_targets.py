import asyncio

import pytest

from domhand.dom.service import DomService
from domhand.exceptions import InvalidTarget, TargetNotFound
from domhand.interaction.targets import TargetDescriptor, TargetResolver, mark_selector
from fake_page import FakeBridge, node


def five_buttons():
    return FakeBridge(node('body', None, *(node('button', {'id': f'b{i}'}, text=str(i)) for i in range(1, 6))))


def test_numeric_mark_is_coerced():
    assert TargetDescriptor.parse({'mark': 3}).mark == '3'


def test_preference_order():
    target = TargetDescriptor.parse({'xpath': '//button', 'selector': '#b1', 'mark': '2'})
    assert target.kind == 'mark'
    target = TargetDescriptor.parse({'xpath': '//button', 'selector': '#b1'})
    assert target.kind == 'selector'
    assert TargetDescriptor.parse({'xpath': '//button'}).kind == 'xpath'


@pytest.mark.parametrize('raw', [None, {}, {'mark': ''}, {'unrelated': 1}, 'b1', {'mark': True}, {'selector': 5}])
def test_malformed_targets(raw):
    with pytest.raises(InvalidTarget):
        TargetDescriptor.parse(raw)


def test_mark_selector_escapes_quotes():
    assert mark_selector('a"b') == '[data-domhand-mark="a\\"b"]'


def test_resolve_mark_after_labelling():
    bridge = five_buttons()
    asyncio.run(DomService(bridge).apply_marks())
    resolver = TargetResolver(bridge)

    assert asyncio.run(resolver.resolve({'mark': '3'})) is bridge.find('#b3')
    assert asyncio.run(resolver.resolve({'mark': 3})) is bridge.find('#b3')

    with pytest.raises(TargetNotFound, match='No element with mark 99'):
        asyncio.run(resolver.resolve({'mark': '99'}))


def test_resolve_mark_without_labelling():
    resolver = TargetResolver(five_buttons())
    with pytest.raises(TargetNotFound):
        asyncio.run(resolver.resolve({'mark': '1'}))


def test_resolve_selector_and_xpath():
    bridge = five_buttons()
    resolver = TargetResolver(bridge)
    assert asyncio.run(resolver.resolve({'selector': 'button'})) is bridge.find('#b1')
    assert asyncio.run(resolver.resolve({'xpath': '//button[@id="b4"]'})) is bridge.find('#b4')

    with pytest.raises(TargetNotFound):
        asyncio.run(resolver.resolve({'selector': '#nope'}))
    with pytest.raises(TargetNotFound):
        asyncio.run(resolver.resolve({'xpath': '//input'}))


def test_resolve_rejects_empty_descriptor():
    with pytest.raises(InvalidTarget):
        asyncio.run(TargetResolver(five_buttons()).resolve({}))


def test_payload_and_str():
    target = TargetDescriptor.parse({'selector': '#b1'})
    assert target.to_payload() == {'selector': '#b1'}
    assert str(target) == "selector='#b1'"
