"""
User-Agent Classification

Coarse browser / OS / device labels for analytics, derived by ordered
substring matching. Each rule table is scanned top to bottom and the first
rule with a matching token wins.

This is a heuristic and deliberately approximate. Most browsers advertise
several engines ("... Chrome/120 Safari/537.36"), so the label depends on
rule order rather than on what the browser actually is: Edge is listed
before Chrome, Chrome before Safari, Android before Linux and iOS before
macOS.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

UNKNOWN = "Unknown"
DESKTOP = "Desktop"


@dataclass(frozen=True)
class Rule:
    """A label and the substrings that select it. ``device`` is set on OS rules only."""
    label: str
    tokens: tuple[str, ...]
    device: Optional[str] = None

    def matches(self, user_agent: str) -> bool:
        return any(token in user_agent for token in self.tokens)


BROWSER_RULES: tuple[Rule, ...] = (
    Rule("Edge", ("Edg/", "Edge/")),
    Rule("Firefox", ("Firefox",)),
    Rule("Chrome", ("Chrome",)),
    Rule("Safari", ("Safari",)),
    Rule("Internet Explorer", ("MSIE", "Trident/")),
)

OS_RULES: tuple[Rule, ...] = (
    Rule("Windows", ("Windows",)),
    Rule("Android", ("Android",), device="Mobile"),
    Rule("iOS", ("iPad",), device="Tablet"),
    Rule("iOS", ("iPhone", "iPod"), device="Mobile"),
    Rule("macOS", ("Mac OS",)),
    Rule("Linux", ("Linux",)),
)


@dataclass(frozen=True)
class UserAgentInfo:
    browser: str
    os: str
    device: str


def first_match(user_agent: str, rules: Sequence[Rule]) -> Optional[Rule]:
    """Return the first rule matching the user agent, or None."""
    for rule in rules:
        if rule.matches(user_agent):
            return rule
    return None


def classify_user_agent(user_agent: Optional[str]) -> UserAgentInfo:
    """
    Classify a raw User-Agent header.

    Args:
        user_agent: Header value, possibly empty or missing

    Returns:
        UserAgentInfo with browser, os and device labels. Unmatched fields
        fall back to "Unknown"; device falls back to "Desktop", or "Unknown"
        when there is no user agent at all.
    """
    if not user_agent:
        return UserAgentInfo(browser=UNKNOWN, os=UNKNOWN, device=UNKNOWN)

    browser_rule = first_match(user_agent, BROWSER_RULES)
    os_rule = first_match(user_agent, OS_RULES)

    return UserAgentInfo(
        browser=browser_rule.label if browser_rule else UNKNOWN,
        os=os_rule.label if os_rule else UNKNOWN,
        device=(os_rule.device if os_rule and os_rule.device else DESKTOP),
    )
