from typing import Callable, List, NamedTuple

import structlog

from miraveja_wiring.domain import (
    BeanCandidate,
    BeanDefinition,
    BeanInjectionPoint,
    IBeanIndex,
    IBeanResolver,
    MatchReason,
    MatchResult,
    ResolutionResult,
    normalize_type_name,
)

log = structlog.get_logger(__name__)


def is_type_match(first: str, second: str) -> bool:
    """Check whether two type names can denote the same type.

    Names match when equal, or when one is a dotted suffix of the other at a
    component boundary. The check is symmetric.

    Example:
        >>> is_type_match("com.example.UserService", "UserService")
        True
        >>> is_type_match("com.example.BarUserService", "UserService")
        False
    """
    first = normalize_type_name(first)
    second = normalize_type_name(second)
    if not first or not second:
        return False
    if first == second:
        return True
    return first.endswith("." + second) or second.endswith("." + first)


def is_type_compatible(definition: BeanDefinition, injection: BeanInjectionPoint) -> bool:
    """Check whether the definition's type or an implemented interface matches the requested type."""
    return any(is_type_match(type_name, injection.bean_type) for type_name in definition.provided_types)


class MatchRule(NamedTuple):
    """One entry of the ordered match policy."""

    predicate: Callable[[BeanDefinition, BeanInjectionPoint], bool]
    score: int
    reason: MatchReason


def _has_qualifier(definition: BeanDefinition, injection: BeanInjectionPoint) -> bool:
    return injection.qualifier is not None and injection.qualifier in definition.qualifiers


def _has_name(definition: BeanDefinition, injection: BeanInjectionPoint) -> bool:
    return injection.bean_name is not None and injection.bean_name == definition.name


def _is_primary_type(definition: BeanDefinition, injection: BeanInjectionPoint) -> bool:
    return definition.is_primary and is_type_compatible(definition, injection)


MATCH_RULES = (
    MatchRule(_has_qualifier, 100, MatchReason.EXACT_QUALIFIER),
    MatchRule(_has_name, 90, MatchReason.EXACT_NAME),
    MatchRule(_is_primary_type, 80, MatchReason.PRIMARY_BEAN),
    MatchRule(is_type_compatible, 70, MatchReason.TYPE_MATCH),
)


class BeanResolver(IBeanResolver):
    """Matches injection points against the bean index.

    Stateless: every call works on the index as it is at call time and never
    mutates it.

    Attributes:
        _rules: Ordered match rules; the first satisfied rule decides the result.
    """

    def __init__(self, rules: tuple = MATCH_RULES) -> None:
        """Initialize the resolver.

        Args:
            rules: Match rules in priority order.
        """
        self._rules = rules

    def matches(self, definition: BeanDefinition, injection: BeanInjectionPoint) -> MatchResult:
        """Score one definition against one injection point.

        Rules are tried in order and the first satisfied one wins:

        1. qualifier declared on the definition: 100, ``EXACT_QUALIFIER``
        2. requested bean name equals the definition name: 90, ``EXACT_NAME``
        3. compatible type on a primary definition: 80, ``PRIMARY_BEAN``
        4. compatible type: 70, ``TYPE_MATCH``

        Args:
            definition: The candidate definition.
            injection: The injection point.

        Returns:
            The match result; a non-match has score 0 and no reason.
        """
        for rule in self._rules:
            if rule.predicate(definition, injection):
                return MatchResult.matched(rule.score, rule.reason)
        return MatchResult.no_match()

    def resolve(self, injection: BeanInjectionPoint, index: IBeanIndex) -> List[BeanCandidate]:
        """Resolve an injection point to its ranked candidates.

        Ambiguity and unsatisfiable injections are not errors: several
        candidates sharing the top score mean the injection is ambiguous, an
        empty list means nothing satisfies it. Equal scores are ordered by
        source location.

        Args:
            injection: The injection point.
            index: The index to read from.

        Returns:
            Matching candidates, highest score first.

        Example:
            >>> resolver = BeanResolver()
            >>> candidates = resolver.resolve(payment_injection, index)
            >>> [(c.definition.name, c.score) for c in candidates]
            [('stripePaymentService', 80), ('payPalPaymentService', 70)]
        """
        candidates = []
        for definition in index.find_candidates(injection):
            match = self.matches(definition, injection)
            if match.is_match:
                candidates.append(BeanCandidate(definition=definition, match=match))

        candidates.sort(key=lambda candidate: (-candidate.score, candidate.definition.location.sort_key))
        log.debug(
            "bean_resolver.resolved",
            bean_type=injection.bean_type,
            location=injection.location_key,
            candidates=len(candidates),
        )
        return candidates

    def resolve_result(self, injection: BeanInjectionPoint, index: IBeanIndex) -> ResolutionResult:
        """Resolve an injection point and classify the outcome."""
        return ResolutionResult(injection=injection, candidates=self.resolve(injection, index))

    def find_injection_points(self, definition: BeanDefinition, index: IBeanIndex) -> List[BeanInjectionPoint]:
        """Find the injection points a definition can satisfy.

        Uses the index lookups in the opposite direction and keeps the
        injection points that would navigate back to the definition, i.e.
        where it is among the top-scoring candidates. A primary bean is not a
        usage of a site whose qualifier selects another bean.

        Args:
            definition: The definition.
            index: The index to read from.

        Returns:
            Injection points ordered by source location.
        """
        points = []
        for injection in index.find_injection_candidates(definition):
            if not self.matches(definition, injection).is_match:
                continue
            top = self.resolve_result(injection, index).top_candidates
            if any(candidate.definition.location_key == definition.location_key for candidate in top):
                points.append(injection)
        return points
