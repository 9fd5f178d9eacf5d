"""Path rule tables — declarative routing input for the Router.

A ``RuleTable`` captures one deployment variant: the ordered primary
prefixes, the shared paths that defer to the referer, the default
origin, and how forwarding headers are written. Tables are frozen
module-level constants; nothing mutates them after import.
"""

from dataclasses import dataclass
from enum import Enum

from ilr_proxy.errors import ConfigurationError
from ilr_proxy.routing.origin import OriginLabel


class ForwardedHostPolicy(Enum):
    """How the outbound ``X-Forwarded-Host`` header is written."""

    OVERWRITE = "overwrite"
    SET_IF_ABSENT = "set-if-absent"
    OMIT = "omit"


@dataclass(frozen=True, slots=True)
class PathRule:
    """A literal path prefix mapped to an origin label."""

    prefix: str
    label: OriginLabel

    def matches(self, path: str) -> bool:
        """Byte-wise, case-sensitive prefix test. No normalization."""
        return path.startswith(self.prefix)


@dataclass(frozen=True, slots=True)
class RuleTable:
    """One deployment variant's routing rules.

    ``rules`` are scanned in declared order and the first match wins;
    overlapping prefixes are allowed and resolved by that order.
    ``shared_paths`` never map to an origin directly — a match triggers
    a second scan of ``rules`` against the referer path.
    """

    name: str
    default: OriginLabel
    rules: tuple[PathRule, ...] = ()
    shared_paths: tuple[str, ...] = ()
    home_page: OriginLabel | None = None
    forwarded_host: ForwardedHostPolicy = ForwardedHostPolicy.OVERWRITE
    forward_proto: bool = True

    @property
    def labels(self) -> frozenset[OriginLabel]:
        """Every label this table can route to."""
        found = {self.default, *(rule.label for rule in self.rules)}
        if self.home_page is not None:
            found.add(self.home_page)
        return frozenset(found)


def _rules(label: OriginLabel, *prefixes: str) -> tuple[PathRule, ...]:
    return tuple(PathRule(prefix, label) for prefix in prefixes)


# Always served from Drupal-latest; everything else goes to Drupal-legacy.
LATEST_BIASED = RuleTable(
    name="latest-biased",
    default=OriginLabel.LEGACY,
    home_page=OriginLabel.LATEST,
    rules=_rules(
        OriginLabel.LATEST,
        "/programs/professional-education",
        "/programs/professional-programs",
        "/programs/graduate-degree-programs/blog",
        "/programs/graduate-degree-programs/master-industrial-and-labor-relations-milr",
        "/alumni",
        "/buffalo-co-lab",
        "/cornell-debate",
        "/cjei",
        "/coronavirus",
        "/course",
        "/diversity-equity-and-inclusion",
        "/work-and-coronavirus",
        "/new-york-city",
        "/news",
        "/public-impact",
        "/worker-institute",
        "/scheinman-institute",
        "/scr-summer-school",
        "/current-students",
        "/blog",
        "/ilrie",
        "/ada30",
        "/75",
        "/ithaca-co-lab",
        "/new-conversations-project",
        "/labor-dynamics-institute",
        "/persona",
        "/core",
        "/libraries/union",
        "/themes/custom/union_marketing",
        "/sites/default/files-d8",
        "/system/files/webform",
        "/media/oembed",
        "/modules/contrib",
        "/modules/custom",
    ),
    shared_paths=("/views/ajax",),
    forwarded_host=ForwardedHostPolicy.OVERWRITE,
    forward_proto=True,
)

# Always served from Drupal-legacy; everything else goes to Drupal-latest.
LEGACY_BIASED = RuleTable(
    name="legacy-biased",
    default=OriginLabel.LATEST,
    rules=_rules(
        OriginLabel.LEGACY,
        "/buffalo/about",
        "/conference-center",
        "/eform",
        "/faculty-and-staff-resources",
        # Needs authentication on legacy.
        "/faculty-reporting",
        "/ilr-in-buffalo",
        "/ilr-press",
        "/misc",
        "/modules/node",
        "/modules/system",
        "/modules/user",
        "/mobilizing-against-inequality",
        "/nyc-conference-center",
        "/privacy-policy",
        "/sitemap.xml",
        "/sites/all/libraries",
        "/sites/all/modules",
        "/sites/all/themes",
        # Trailing slash keeps /sites/default/files-d8 on latest.
        "/sites/default/files/",
        "/student-forms",
        "/web-accessibility",
    ),
    shared_paths=("/views/ajax",),
    forwarded_host=ForwardedHostPolicy.OMIT,
    forward_proto=False,
)

# Passthrough: every request goes to the one configured origin.
SINGLE_ORIGIN = RuleTable(
    name="single-origin",
    default=OriginLabel.LEGACY,
    forwarded_host=ForwardedHostPolicy.SET_IF_ABSENT,
    forward_proto=True,
)

TABLES: dict[str, RuleTable] = {
    table.name: table for table in (LATEST_BIASED, LEGACY_BIASED, SINGLE_ORIGIN)
}


def get_table(name: str) -> RuleTable:
    """Look up a built-in rule table by name.

    Raises:
        ConfigurationError: If no table has that name.
    """
    try:
        return TABLES[name]
    except KeyError:
        choices = ", ".join(sorted(TABLES))
        msg = f"Unknown rule table {name!r}. Choose one of: {choices}."
        raise ConfigurationError(msg) from None
