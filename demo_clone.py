"""
Demo: compare shallow, deep and round-trip clones on the example values.
"""

from clonekit.analyzer import analyze_value, shared_composites
from clonekit.cloner import ValueCloner
from clonekit.errors import EncodingError
from clonekit.examples import build_account, build_cyclic_graph, build_lossy_value, build_profile
from clonekit.options import CloneMode, CloneOptions, TextFormat
from clonekit.serialization import value_to_yaml


def print_report(report):
    """Pretty-print a ValueReport."""
    print(f"  Root kind:        {report.root_kind.value}")
    print(f"  Composites:       {report.total_composites}")
    print(f"  Max depth:        {report.max_depth}")
    print(f"  Has cycles:       {'YES' if report.has_cycles else 'NO'}")
    print(f"  Serializable:     {'YES' if report.is_serializable else 'NO'}")
    for i, warning in enumerate(report.warnings, 1):
        print(f"  {i}. {warning}")
    print()


if __name__ == "__main__":
    cloner = ValueCloner()

    print("=" * 70)
    print("SHALLOW vs DEEP")
    print("=" * 70)
    profile = build_profile()
    shallow = cloner.clone(profile, CloneMode.SHALLOW)
    deep = cloner.clone(profile, CloneMode.DEEP_RECURSIVE)
    shallow["friends"].append("Minji")
    deep["address"]["city"] = "Busan"
    print(f"  original:         {profile}")
    print(f"  shallow is copy:  {shallow is not profile}")
    print(f"  shared (shallow): {shared_composites(profile, shallow)}")
    print(f"  shared (deep):    {shared_composites(profile, deep)}")
    print()

    print("=" * 70)
    print("RECORDS")
    print("=" * 70)
    account = build_account()
    inherited = cloner.clone(account, CloneMode.DEEP_RECURSIVE)
    own_only = ValueCloner(CloneOptions(own_keys_only=True)).clone(account, CloneMode.DEEP_RECURSIVE)
    print(f"  deep (inherited): {sorted(vars(inherited))}")
    print(f"  deep (own only):  {sorted(vars(own_only))}")
    print(f"  round trip:       {cloner.clone(account, CloneMode.SERIALIZE_ROUND_TRIP)}")
    print()
    print(value_to_yaml(account))

    print("=" * 70)
    print("LOSSY ROUND TRIP")
    print("=" * 70)
    lossy = build_lossy_value()
    print_report(analyze_value(lossy))
    yaml_cloner = ValueCloner(CloneOptions(text_format=TextFormat.YAML))
    print(f"  round trip:       {yaml_cloner.clone(lossy, CloneMode.SERIALIZE_ROUND_TRIP)}")
    print()

    print("=" * 70)
    print("CYCLES")
    print("=" * 70)
    graph = build_cyclic_graph()
    print_report(analyze_value(graph))
    copy = cloner.clone(graph, CloneMode.DEEP_RECURSIVE)
    print(f"  deep copy keeps the loop: {copy['self'] is copy}")
    try:
        cloner.clone(graph, CloneMode.SERIALIZE_ROUND_TRIP)
    except EncodingError as e:
        print(f"  round trip failed: {e}")
