import json
import sys

from enterprise_intel.config.env import get_registry_config
from enterprise_intel.registry.merger import unify_registries
from enterprise_intel.registry.parser import DOMESTIC, GLOBAL, load_registry
from .aliases import load_default_aliases
from .core import NameMatcher
from .ids import company_id


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: python -m enterprise_intel.resolver.cli <company name>")
        sys.exit(2)
    name = " ".join(args)
    reg = get_registry_config()
    unified = unify_registries(load_registry(reg.global_path, GLOBAL), load_registry(reg.domestic_path, DOMESTIC))
    aliases = load_default_aliases()
    m = NameMatcher([e.name for e in unified], aliases).match(name)
    hit = next((e for e in unified if m is not None and e.name == m.name), None)
    print(json.dumps({
        "query": name,
        "id": company_id(name),
        "alias": aliases.resolve(name) if name in aliases else None,
        "match": None if hit is None else {
            "name": hit.name,
            "rank": hit.rank,
            "provenance": hit.provenance,
            "reason": m.reason,
        },
    }, indent=2))


if __name__ == "__main__":
    main()
