"""Template heuristics that map page fragments onto card fields.

Page 1 is scanned as a sequence: each follow rule is a tiny state machine
that arms on a trigger fragment and captures the fragment right after it.
Page 2 is matched geometrically against fixed page coordinates.

Both passes are best effort: they never raise, and fields they cannot find
are simply left out of the returned update.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from certcard.extraction.models import AnchorPoint, FieldUpdate, TextFragment

NAME_INDEX = 2
DATE_1_MARKER = "DATA E ORARIO SVOLGIMENTO LEZIONE"
DATE_2_MARKER = "SEDE DI SVOLGIMENTO DEL CORSO/I"

ATTESTATION_ANCHOR = AnchorPoint(x=645.51656, y=537.021543)
ATTESTATION_PROXIMITY = 30.0
ATTESTATION_LENGTH = 10
BOTTOM_BAND_Y = 50.0
BOTTOM_EXCLUDED = ("Powered by", "e s.m.i.")


class ScanState(Enum):
    IDLE = "idle"
    ARMED_FOR_DESCRIPTION = "armed_for_description"
    ARMED_FOR_DATE_1 = "armed_for_date_1"
    ARMED_FOR_DATE_2 = "armed_for_date_2"


Trigger = Callable[[int, TextFragment], bool]


@dataclass
class FollowRule:
    """Arm on ``trigger``, then capture the next fragment into ``capture_field``.

    When armed, the next fragment is always captured, even if it would also
    match the trigger. ``trigger_field`` optionally stores the trigger
    fragment itself.
    """

    armed_state: ScanState
    capture_field: str
    trigger: Trigger
    trigger_field: str | None = None
    state: ScanState = ScanState.IDLE

    def feed(self, index: int, fragment: TextFragment, captured: dict[str, str]) -> None:
        if self.state is self.armed_state:
            captured[self.capture_field] = fragment.text
            self.state = ScanState.IDLE
        elif self.trigger(index, fragment):
            if self.trigger_field is not None:
                captured[self.trigger_field] = fragment.text
            self.state = self.armed_state


def _at_index(target: int) -> Trigger:
    return lambda index, _fragment: index == target


def _contains(marker: str) -> Trigger:
    return lambda _index, fragment: marker in fragment.text


def page_one_rules() -> list[FollowRule]:
    return [
        FollowRule(
            armed_state=ScanState.ARMED_FOR_DESCRIPTION,
            capture_field="name_description",
            trigger=_at_index(NAME_INDEX),
            trigger_field="name",
        ),
        FollowRule(
            armed_state=ScanState.ARMED_FOR_DATE_1,
            capture_field="date_1",
            trigger=_contains(DATE_1_MARKER),
        ),
        FollowRule(
            armed_state=ScanState.ARMED_FOR_DATE_2,
            capture_field="date_2",
            trigger=_contains(DATE_2_MARKER),
        ),
    ]


def locate_page_one(fragments: Sequence[TextFragment]) -> FieldUpdate:
    """Capture name, name description and the two lesson dates from page 1."""
    rules = page_one_rules()
    captured: dict[str, str] = {}
    for index, fragment in enumerate(fragments):
        for rule in rules:
            rule.feed(index, fragment, captured)
    return FieldUpdate(**captured)


def locate_page_two(
    fragments: Sequence[TextFragment],
    anchor: AnchorPoint = ATTESTATION_ANCHOR,
    proximity: float = ATTESTATION_PROXIMITY,
    bottom_band: float = BOTTOM_BAND_Y,
) -> FieldUpdate:
    """Capture the attestation number near ``anchor`` and the two footer dates."""
    attestation_number: str | None = None
    bottom_dates: list[str] = []

    for fragment in fragments:
        if (
            abs(fragment.x - anchor.x) < proximity
            and abs(fragment.y - anchor.y) < proximity
            and len(fragment.text) == ATTESTATION_LENGTH
        ):
            attestation_number = fragment.text

        if fragment.y < bottom_band and not any(
            excluded in fragment.text for excluded in BOTTOM_EXCLUDED
        ):
            bottom_dates.append(fragment.text)

    update = FieldUpdate(attestation_number=attestation_number)
    if len(bottom_dates) >= 2:
        update = update.merged_with(
            FieldUpdate(bottom_date_1=bottom_dates[0], bottom_date_2=bottom_dates[1])
        )
    return update
