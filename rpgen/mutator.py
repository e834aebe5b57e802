"""
Candidate mutator: builds a random candidate and repairs it, one
character at a time, until it satisfies the policy or the round budget
runs out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from .config import GeneratorConfig
from .errors import ImpossiblePolicyError, ImpossibleReason
from .policy import PasswordPolicy
from .random_source import RandomSource
from .seeds import CharClass, SeedMachine, default_alphabet
from .validator import DisallowedValues, ViolationKind, validate

Validator = Callable[[str, PasswordPolicy], "list[ViolationKind]"]
Candidate = list  # list[str], one character per item


@dataclass(frozen=True)
class MutationResult:
    password: str
    valid: bool
    rounds: int


# --- single character edits ---

def add_rand_char(
    rng: RandomSource,
    password: Candidate,
    allowed_chars: str,
    position: int | None = None,
) -> None:
    """
    Insert one character from `allowed_chars` at `position`, or at a
    random position (end included) when none is given.
    """
    if not allowed_chars:
        raise ImpossiblePolicyError(ImpossibleReason.REQUIRED_CHAR_NOT_ALLOWED)
    if position is None:
        position = rng.next_int(len(password) + 1)
    password.insert(position, allowed_chars[rng.next_int(len(allowed_chars))])


def delete_rand_char(rng: RandomSource, password: Candidate, char_class: CharClass) -> None:
    """
    Delete one character of `char_class`, chosen uniformly among those present.
    """
    positions = [i for i, c in enumerate(password) if char_class.matches(c)]
    if not positions:
        # Only called when a too-many violation proved such a character exists.
        raise ImpossiblePolicyError(
            ImpossibleReason.UNEXPECTED_ERROR,
            f"no {char_class.value} character left to delete",
        )
    del password[positions[rng.next_int(len(positions))]]


def switch_random_case(rng: RandomSource, password: Candidate) -> bool:
    """
    Flip the case of the first letter found scanning (cyclically) from a
    random start. Returns False when there is no letter to flip.
    """
    if not password:
        return False
    start = rng.next_int(len(password))
    for offset in range(len(password)):
        spot = (start + offset) % len(password)
        old = password[spot]
        new = old.swapcase()
        # "ß".swapcase() is "SS"; only single character flips are usable.
        if old.isalpha() and len(new) == 1 and new != old:
            password[spot] = new
            return True
    return False


def random_modifier(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> None:
    """
    Generic nudge for violations without a targeted repair.
    """
    choice = rng.next_int(5)
    if choice == 0:
        add_rand_char(rng, password, seed_machine.special_chars)
    elif choice == 1:
        add_rand_char(rng, password, seed_machine.num_chars)
    elif choice == 2:
        add_rand_char(rng, password, seed_machine.upper_chars)
    elif choice == 3:
        add_rand_char(rng, password, seed_machine.lower_chars)
    else:
        switch_random_case(rng, password)


def generate_new_password(rng: RandomSource, seed_machine: SeedMachine, desired_length: int) -> Candidate:
    """
    Fresh candidate: random seed phrases up to `desired_length - 1`
    characters, sometimes an extra digit, sometimes one flipped case.
    """
    password: Candidate = []
    while len(password) < desired_length - 1:
        password.extend(seed_machine.random_seed())

    if rng.next_int(3) == 0:
        add_rand_char(
            rng,
            password,
            default_alphabet(CharClass.NUMERIC),
            rng.next_int(len(password) + 1),
        )

    if rng.next_bool():
        switch_random_case(rng, password)

    return password


# --- repair table ---

RepairAction = Callable[[RandomSource, Candidate, SeedMachine], bool]


def _insert_from(char_class: CharClass) -> RepairAction:
    def action(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
        add_rand_char(rng, password, seed_machine.class_alphabet(char_class))
        return True

    return action


def _delete_from(char_class: CharClass) -> RepairAction:
    def action(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
        if not any(char_class.matches(c) for c in password):
            return False
        delete_rand_char(rng, password, char_class)
        return True

    return action


def _delete_any(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
    if not password:
        return False
    del password[rng.next_int(len(password))]
    return True


def _delete_first(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
    if not password:
        return False
    del password[0]
    return True


def _delete_last(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
    if not password:
        return False
    del password[-1]
    return True


def _strengthen(rng: RandomSource, password: Candidate, seed_machine: SeedMachine) -> bool:
    random_modifier(rng, password, seed_machine)
    return True


# Applied top to bottom, at most once per row per round.
REPAIR_ORDER: tuple[tuple[frozenset, RepairAction], ...] = (
    (frozenset({ViolationKind.TOO_SHORT}), _insert_from(CharClass.ALL)),
    (frozenset({ViolationKind.TOO_LONG}), _delete_any),
    (frozenset({ViolationKind.FIRST_IS_NUMERIC, ViolationKind.FIRST_IS_SPECIAL}), _delete_first),
    (frozenset({ViolationKind.LAST_IS_NUMERIC, ViolationKind.LAST_IS_SPECIAL}), _delete_last),
    (frozenset({ViolationKind.NOT_ENOUGH_NUMERIC}), _insert_from(CharClass.NUMERIC)),
    (frozenset({ViolationKind.NOT_ENOUGH_SPECIAL}), _insert_from(CharClass.SPECIAL)),
    (frozenset({ViolationKind.NOT_ENOUGH_UPPER}), _insert_from(CharClass.UPPER)),
    (frozenset({ViolationKind.NOT_ENOUGH_LOWER}), _insert_from(CharClass.LOWER)),
    (frozenset({ViolationKind.TOO_MANY_NUMERIC}), _delete_from(CharClass.NUMERIC)),
    (frozenset({ViolationKind.TOO_MANY_SPECIAL}), _delete_from(CharClass.SPECIAL)),
    (frozenset({ViolationKind.TOO_MANY_UPPER}), _delete_from(CharClass.UPPER)),
    (frozenset({ViolationKind.TOO_MANY_LOWER}), _delete_from(CharClass.LOWER)),
    (frozenset({ViolationKind.TOO_WEAK}), _strengthen),
)


def modify_password_based_on_errors(
    rng: RandomSource,
    password: Candidate,
    errors: Iterable[ViolationKind],
    seed_machine: SeedMachine,
) -> None:
    kinds = set(errors)
    if not kinds:
        return

    touched = False
    for row_kinds, action in REPAIR_ORDER:
        if kinds & row_kinds:
            touched = action(rng, password, seed_machine) or touched

    if not touched:
        # Nothing targeted applies; change something and let validation decide.
        random_modifier(rng, password, seed_machine)


class CandidateMutator:
    """
    Runs the generate / validate / repair loop for one generate call.

    Not thread safe; build one per call.
    """

    def __init__(
        self,
        rng: RandomSource,
        seed_machine: SeedMachine,
        config: GeneratorConfig,
        policy: PasswordPolicy,
        validator: Validator = validate,
        disallowed: DisallowedValues | None = None,
    ) -> None:
        self.rng = rng
        self.seed_machine = seed_machine
        self.config = config
        self.policy = policy
        self.validator = validator
        self.disallowed = disallowed

    def new_candidate(self) -> Candidate:
        return generate_new_password(self.rng, self.seed_machine, self.config.minimum_length)

    def run(self, max_rounds: int | None = None) -> MutationResult:
        """
        Mutate a fresh candidate until it is valid or `max_rounds`
        (default: the config's maximum_attempts) rounds have been used.
        Running out of rounds is reported in the result, not raised.
        """
        if max_rounds is None:
            max_rounds = self.config.maximum_attempts
        jitter = self.config.jitter

        password = self.new_candidate()
        rounds = 0
        valid = False
        while not valid and rounds < max_rounds:
            rounds += 1

            if rounds % jitter == 0:
                password = self.new_candidate()

            candidate = "".join(password)
            errors = self.validator(candidate, self.policy)
            if errors:
                modify_password_based_on_errors(self.rng, password, errors, self.seed_machine)
            elif self.disallowed is not None and self.disallowed.matches(candidate):
                # Local edits can't be trusted to escape these; start over.
                password = self.new_candidate()
            else:
                valid = True

        return MutationResult(password="".join(password), valid=valid, rounds=rounds)
