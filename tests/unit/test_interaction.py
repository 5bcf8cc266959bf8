import asyncio

import pytest

from domhand.exceptions import InvalidTarget, TargetNotFound
from domhand.interaction.pacing import PacingEngine
from domhand.interaction.service import InteractionService, wants_checked
from domhand.interaction.views import FormField, InteractionOptions, ScrollOptions
from fake_page import FakeBridge, node


class RecordingPacing(PacingEngine):
    """Logs each pause into the bridge step log instead of sleeping."""

    def __init__(self, bridge):
        super().__init__(enabled=False, run_seed=11)
        self.bridge = bridge
        self.windows = []

    async def pause(self, window):
        self.windows.append(window.name)
        self.bridge.log.append((f'pause:{window.name}', None))
        return 0


@pytest.fixture
def recording(bridge):
    return RecordingPacing(bridge)


@pytest.fixture
def service(bridge, recording):
    return InteractionService(bridge, pacing=recording)


def test_click_event_sequence(service, bridge):
    descriptor = asyncio.run(service.click({'selector': '#submit'}))

    assert bridge.steps() == [
        'scrollIntoView',
        'pause:click_settle',
        'mousemove',
        'pause:pointer_move',
        'mouseenter',
        'mousedown',
        'pause:press_hold',
        'mouseup',
        'click',
    ]
    assert bridge.log[0] == ('scrollIntoView', 'smooth')
    assert descriptor.id == 'submit'
    assert descriptor.label == 'Create account'


def test_click_pointer_lands_near_center(service, bridge):
    asyncio.run(service.click({'selector': '#submit'}))
    for _, event_type, init in bridge.events:
        assert abs(init['clientX'] - 50) <= 2
        assert abs(init['clientY'] - 10) <= 2
    coordinates = {(init['clientX'], init['clientY']) for _, _, init in bridge.events}
    assert len(coordinates) == 1


def test_right_click_adds_context_menu(service, bridge):
    asyncio.run(service.click({'selector': '#submit'}, InteractionOptions(rightClick=True)))
    assert bridge.event_types()[-2:] == ['click', 'contextmenu']
    assert bridge.events[-1][2]['button'] == 2


def test_click_returns_post_click_state(service, bridge):
    descriptor = asyncio.run(service.click({'selector': '#agree'}))
    assert descriptor.checked is True
    assert bridge.find('#agree').checked is True


def test_click_unknown_target(service):
    with pytest.raises(TargetNotFound):
        asyncio.run(service.click({'selector': '#missing'}))
    with pytest.raises(InvalidTarget):
        asyncio.run(service.click({}))


def test_type_replaces_old_value(service, bridge):
    descriptor = asyncio.run(service.type_text({'selector': '#name'}, 'new', InteractionOptions(clearFirst=True)))
    assert bridge.find('#name').value == 'new'
    assert descriptor.value == 'new'


def test_type_appends_without_clear(service, bridge):
    asyncio.run(service.type_text({'selector': '#name'}, '!'))
    assert bridge.find('#name').value == 'old!'


def test_type_event_sequence(service, bridge):
    asyncio.run(service.type_text({'selector': '#name'}, 'ab', InteractionOptions(clearFirst=True)))
    assert bridge.steps() == [
        'scrollIntoView',
        'pause:type_settle',
        'focus',
        'pause:focus_settle',
        'clear',
        'input',
        'keydown',
        'keypress',
        'apply:a',
        'keyup',
        'input',
        'pause:keystroke',
        'keydown',
        'keypress',
        'apply:b',
        'keyup',
        'input',
        'pause:keystroke',
        'change',
    ]
    assert bridge.focused is bridge.find('#name')
    keys = [init['key'] for _, event_type, init in bridge.events if event_type == 'keydown']
    assert keys == ['a', 'b']


def test_human_delay_off_skips_only_keystroke_pauses(service, bridge, recording):
    asyncio.run(service.type_text({'selector': '#name'}, 'abc', InteractionOptions(humanDelay=False)))
    assert recording.windows == ['type_settle', 'focus_settle']
    assert bridge.find('#name').value == 'oldabc'


def test_type_into_content_editable(service, bridge):
    asyncio.run(service.type_text({'selector': '#bio'}, 'hi', InteractionOptions(clearFirst=True)))
    assert bridge.find('#bio').text == 'hi'


def test_type_into_non_editable_fires_events_only(service, bridge):
    asyncio.run(service.type_text({'selector': '#submit'}, 'x'))
    assert 'apply:x' not in bridge.steps()
    assert bridge.event_types(bridge.find('#submit'))[-1] == 'change'


def test_scroll_by_offset(service, bridge, recording):
    position = asyncio.run(service.scroll(ScrollOptions(x=0, y=400, behavior='instant')))
    assert position == {'scrollX': 0.0, 'scrollY': 400.0}
    assert bridge.log[0] == ('scrollBy', 'instant')
    assert recording.windows == ['scroll_settle']


def test_scroll_to_selector(service, bridge):
    bridge.find('#submit').rect = (0, 1500, 100, 20)
    position = asyncio.run(service.scroll(ScrollOptions(selector='#submit')))
    assert bridge.log[0] == ('scrollIntoView', 'smooth')
    assert position['scrollY'] == 1200.0


def test_scroll_to_missing_selector_keeps_position(service, bridge, recording):
    bridge.scroll = [0.0, 50.0]
    position = asyncio.run(service.scroll(ScrollOptions(selector='#nowhere')))
    assert position == {'scrollX': 0.0, 'scrollY': 50.0}
    assert recording.windows == ['scroll_settle']


def test_fill_form_isolates_failures(service, bridge):
    fields = [
        FormField(target={'selector': '#name'}, value='Ada'),
        FormField(target={'selector': '#does-not-exist'}, value='x'),
    ]
    results = asyncio.run(service.fill_form(fields))
    assert [r.ok for r in results] == [True, False]
    assert 'No element matching' in results[1].error
    assert bridge.find('#name').value == 'Ada'


def test_fill_form_select_toggle_and_text(service, bridge):
    fields = [
        FormField.model_validate({'target': {'selector': '#plan'}, 'value': 'Pro', 'type': 'select'}),
        FormField(target={'selector': '#agree'}, value='true'),
        FormField(target={'selector': '#bio'}, value='Engineer'),
    ]
    results = asyncio.run(service.fill_form(fields))
    assert all(r.ok for r in results)
    assert bridge.find('#plan').value == 'pro'
    assert bridge.event_types(bridge.find('#plan')) == ['change']
    assert bridge.find('#agree').checked is True
    assert bridge.find('#bio').text == 'Engineer'


def test_fill_form_toggle_only_clicks_on_change(service, bridge):
    checkbox = bridge.find('#agree')
    checkbox.checked = True
    results = asyncio.run(service.fill_form([FormField(target={'selector': '#agree'}, value=True, kind='checkbox')]))
    assert results[0].ok
    assert bridge.event_types(checkbox) == []

    asyncio.run(service.fill_form([FormField(target={'selector': '#agree'}, value='no', kind='checkbox')]))
    assert 'click' in bridge.event_types(checkbox)
    assert checkbox.checked is False


def test_fill_form_select_without_match_keeps_selection(service, bridge):
    results = asyncio.run(service.fill_form([FormField(target={'selector': '#plan'}, value='enterprise', kind='select')]))
    assert results[0].to_payload() == {'target': {'selector': '#plan'}, 'ok': True}
    assert bridge.find('#plan').value == 'free'
    assert bridge.event_types(bridge.find('#plan')) == []


def test_fill_form_entry_that_is_not_an_object_fails_alone(service, bridge):
    results = asyncio.run(
        service.fill_form(
            [
                {'target': {'selector': '#name'}, 'value': 'Ada'},
                'garbage',
                {'target': {'selector': '#bio'}, 'value': 'Engineer'},
            ]
        )
    )
    assert [r.ok for r in results] == [True, False, True]
    assert results[1].target is None
    assert results[1].error.startswith('Invalid form field: ')
    assert bridge.find('#name').value == 'Ada'
    assert bridge.find('#bio').text == 'Engineer'


def test_fill_form_malformed_target(service):
    results = asyncio.run(service.fill_form([FormField(target=None, value='x'), FormField(target={'selector': '#name'}, value='y')]))
    assert [r.ok for r in results] == [False, True]
    assert results[0].to_payload() == {'ok': False, 'error': 'target is required'}


def test_radio_group_toggle():
    bridge = FakeBridge(
        node(
            'body',
            None,
            node('input', {'id': 'r1', 'type': 'radio', 'name': 'size'}, checked=True),
            node('input', {'id': 'r2', 'type': 'radio', 'name': 'size'}),
        )
    )
    service = InteractionService(bridge, pacing=PacingEngine(enabled=False))
    results = asyncio.run(service.fill_form([FormField(target={'selector': '#r2'}, value=1)]))
    assert results[0].ok
    assert bridge.find('#r2').checked is True
    assert bridge.find('#r1').checked is False


@pytest.mark.parametrize(
    'value, expected',
    [(True, True), ('true', True), ('TRUE', True), ('1', True), (1, True), (False, False), ('false', False), ('yes', False), (None, False)],
)
def test_wants_checked(value, expected):
    assert wants_checked(value) is expected
