import pytest

from unipddl.action import TemporalAction
from unipddl.condition import Function, Ground
from unipddl.expression import Decrease, FunctionExpression, Increase
from unipddl.filereader import Filereader, PddlError, UnknownToken
from unipddl.logic import And, Equals, Not, Or
from unipddl.domain import Domain
from unipddl.typesys import EitherType

TRUCKING = """(define (domain trucking)
  (:requirements :strips :typing :equality :action-costs)
  (:types truck location - object)
  (:constants depot - location)
  (:predicates (at ?t - truck ?l - location) (road ?a ?b - location))
  (:functions (total-cost) - number)
  (:action drive
    :parameters (?t - truck ?from ?to - location)
    :precondition (and (at ?t ?from) (road ?from ?to) (not (= ?from ?to)))
    :effect (and (not (at ?t ?from)) (at ?t ?to) (increase (total-cost) 1)))
  (:action park
    :parameters (?t - truck)
    :precondition ()
    :effect (at ?t depot))
  (:derived (road ?a ?b - location) (road ?b ?a))
)
"""

TEMPORAL = """(define (domain moving)
  (:requirements :typing :durative-actions)
  (:types truck location)
  (:predicates (at ?t - truck ?l - location))
  (:durative-action move
    :parameters (?t - truck ?from ?to - location)
    :duration (= ?duration 5)
    :condition (and (at start (at ?t ?from)))
    :effect (and (at start (not (at ?t ?from))) (at end (at ?t ?to))))
)
"""

PRIVATE = """(define (domain ma)
  (:requirements :typing)
  (:types agent)
  (:predicates (:private ?a - agent (secret ?a - agent)) (open))
)
"""


def _load(text):
    domain = Domain()
    domain.parse_text(text)
    return domain


def _built():
    d = Domain()
    d.name = "BUILT"
    d.typed = True
    d.strips = True
    d.create_type("TRUCK")
    d.create_type("PLACE")
    d.create_predicate("AT", ["TRUCK", "PLACE"])
    d.create_action("GO", ["TRUCK", "PLACE", "PLACE"])
    return d


def test_name_and_requirement_flags():
    d = _load(TRUCKING)
    assert d.name == "TRUCKING"
    assert (d.strips, d.typed, d.equality, d.costs) == (True, True, True, True)
    assert (d.adl, d.temp, d.neg) == (False, False, False)


def test_print_requirements_order():
    d = _load(TRUCKING)
    assert d.print_requirements() == "( :REQUIREMENTS :EQUALITY :STRIPS :ACTION-COSTS :TYPING )\n"


def test_type_hierarchy():
    d = _load(TRUCKING)
    assert d.types[0].name == "OBJECT"
    assert d.types.get("TRUCK").supertype is d.types[0]
    assert d.types.get("LOCATION").supertype is d.types[0]


def test_constants_and_constant_index():
    d = _load(TRUCKING)
    assert d.cons
    assert list(d.types.get("LOCATION").constants) == ["DEPOT"]
    assert d.constant_index("DEPOT", "LOCATION") == -1


def test_predicates_and_functions():
    d = _load(TRUCKING)
    truck, location = d.types.index("TRUCK"), d.types.index("LOCATION")
    assert d.preds.get("AT").params == [truck, location]
    assert d.preds.get("ROAD").params == [location, location]
    assert d.funcs.get("TOTAL-COST").return_type == -1


def test_action_structure():
    d = _load(TRUCKING)
    drive = d.actions.get("DRIVE")
    assert len(drive.precons()) == 3
    assert isinstance(drive.precons()[2], Not)
    assert isinstance(drive.precons()[2].cond, Equals)
    assert [g.params for g in drive.add_effects()] == [[0, 2]]
    assert [g.params for g in drive.delete_effects()] == [[0, 1]]
    assert any(isinstance(c, Increase) for c in drive.effects())


def test_action_without_precondition():
    d = _load(TRUCKING)
    park = d.actions.get("PARK")
    assert park.pre is None
    assert park.precons() == []
    effects = park.add_effects()
    assert [g.params for g in effects] == [[0, -1]]
    assert d.object_list(effects[0])[1] == "DEPOT"


def test_derived_predicate():
    d = _load(TRUCKING)
    derived = d.derived.get("ROAD")
    assert derived.params == d.preds.get("ROAD").params
    assert isinstance(derived.cond, Ground)
    assert derived.cond.params == [1, 0]


def test_round_trip_is_stable():
    first = str(_load(TRUCKING))
    again = str(_load(first))
    assert again == first
    assert first.startswith("( DEFINE ( DOMAIN TRUCKING )\n")
    assert first.endswith(")\n")


def test_parse_from_file(tmp_path):
    path = tmp_path / "dom.pddl"
    path.write_text(TRUCKING)
    d = Domain(path)
    assert str(d) == str(_load(TRUCKING))


def test_temporal_domain():
    d = _load(TEMPORAL)
    assert d.temp
    move = d.actions.get("MOVE")
    assert isinstance(move, TemporalAction)
    assert move.duration() == 5
    assert [g.params for g in move.precons_start()] == [[0, 1]]
    assert [g.params for g in move.delete_effects()] == [[0, 1]]
    assert [g.params for g in move.add_end_effects()] == [[0, 2]]
    text = str(d)
    assert str(_load(text)) == text


def test_private_predicates_are_read():
    d = _load(PRIVATE)
    assert [p.name for p in d.preds] == ["SECRET", "OPEN"]
    assert d.preds.get("SECRET").params == [d.types.index("AGENT")]


def test_object_declared_as_type_renames_root():
    d = _load("(define (domain x) (:requirements :typing) (:types thing - object object))")
    assert d.types[0].name == "SUPERTYPE"
    assert d.types.get("THING").supertype is d.types.get("OBJECT")
    assert d.types.get("OBJECT").supertype is d.types[0]


def test_types_without_typing_requirement():
    with pytest.raises(PddlError):
        _load("(define (domain x) (:types a))")


def test_action_before_predicates():
    with pytest.raises(PddlError):
        _load("(define (domain x) (:action a :parameters () :effect ()))")


def test_unknown_block():
    with pytest.raises(UnknownToken) as info:
        _load("(define (domain x) (:foo))")
    assert info.value.token == "FOO"


def test_unknown_requirement():
    with pytest.raises(UnknownToken) as info:
        _load("(define (domain x) (:requirements :bogus))")
    assert info.value.token == "BOGUS"


def test_parse_requirement_return_value():
    d = Domain()
    assert d.parse_requirement("FLUENTS") is True
    assert d.fluents is True
    assert d.parse_requirement("NOPE") is False


def test_get_type_either():
    d = _load(TRUCKING)
    either = d.get_type("( EITHER TRUCK LOCATION )")
    assert isinstance(either, EitherType)
    assert [t.name for t in either.subtypes] == ["TRUCK", "LOCATION"]
    assert either.get_name() == "EITHER_TRUCK_LOCATION"
    assert d.get_type("( EITHER TRUCK LOCATION )") is either


def test_convert_types_creates_missing():
    d = Domain()
    indices = d.convert_types(["OBJECT", "NEW"])
    assert indices[0] == 0
    assert d.types[indices[1]].name == "NEW"


def test_create_condition():
    d = _load(TRUCKING)
    assert isinstance(d.create_condition(Filereader.from_text("and")), And)
    ground = d.create_condition(Filereader.from_text("road"))
    assert isinstance(ground, Ground) and ground.lifted is d.preds.get("ROAD")
    with pytest.raises(UnknownToken):
        d.create_condition(Filereader.from_text("mystery"))


def test_builder_effects_and_round_trip():
    d = _built()
    d.add_pre(False, "GO", "AT", [0, 1])
    d.add_eff(True, "GO", "AT", [0, 1])
    d.add_eff(False, "GO", "AT", [0, 2])
    d.add_cost("GO", 2)
    action = d.actions.get("GO")
    assert [g.params for g in action.add_effects()] == [[0, 2]]
    assert [g.params for g in action.delete_effects()] == [[0, 1]]
    assert len(action.precons()) == 1
    text = str(d)
    assert str(_load(text)) == text


def test_add_or_pre():
    d = _built()
    d.add_or_pre("GO", "AT", "AT", [0, 1], [0, 2])
    last = d.actions.get("GO").pre.conds[-1]
    assert isinstance(last, Or)
    assert (last.first.params, last.second.params) == ([0, 1], [0, 2])


def test_set_pre_and_set_eff_copy():
    d = _built()
    atom = d.ground("AT", [0, 1])
    d.set_pre("GO", atom)
    pre = d.actions.get("GO").pre
    assert isinstance(pre, And) and len(pre.conds) == 1
    assert pre.conds[0] is not atom and pre.conds[0].params == [0, 1]
    d.set_eff("GO", None)
    assert d.actions.get("GO").eff.conds == []


def test_function_cost_and_modifier():
    d = _built()
    fuel = d.create_function("FUEL", -1, ["TRUCK"])
    assert isinstance(fuel, Function) and d.funcs.get("FUEL") is fuel
    d.add_function_cost("GO", "FUEL", [0])
    d.add_function_modifier("GO", Decrease(4))
    conds = d.actions.get("GO").eff.conds
    assert isinstance(conds[-2].modifier_expr, FunctionExpression)
    assert conds[-2].modifier_expr.fun.name == "FUEL"
    assert conds[-1].modifier_expr.value == 4


def test_ground_unknown_predicate():
    d = _built()
    with pytest.raises(PddlError):
        d.ground("MISSING", [0])


def test_add_params_extends_action():
    d = _built()
    d.add_params("GO", ["PLACE"])
    place = d.types.index("PLACE")
    assert d.actions.get("GO").params[-1] == place
    assert len(d.actions.get("GO").params) == 4


def test_assert_subtype_and_type_list():
    d = _built()
    truck = d.types.index("TRUCK")
    assert d.assert_subtype(truck, 0) is True
    assert d.assert_subtype(0, truck) is False
    assert d.type_list(d.actions.get("GO")) == ["TRUCK", "PLACE", "PLACE"]


def test_object_list():
    d = _load(TRUCKING)
    d.types.get("TRUCK").objects.insert("T1")
    assert d.object_list(d.ground("AT", [0, -1])) == ["T1", "DEPOT"]


def test_copy_types_is_independent():
    d = _load(TRUCKING)
    out = d.copy_types()
    assert [t.name for t in out] == [t.name for t in d.types]
    assert out.get("TRUCK") is not d.types.get("TRUCK")
    assert out.get("TRUCK").supertype is out[0]
    out.get("LOCATION").constants.insert("EXTRA")
    assert list(d.types.get("LOCATION").constants) == ["DEPOT"]
    d.set_types(out)
    assert d.types is out


def test_create_type_with_parent_and_constant():
    d = _built()
    d.create_type("VAN", "TRUCK")
    d.create_constant("V1", "VAN")
    assert d.types.get("VAN").supertype is d.types.get("TRUCK")
    assert d.types.get("TRUCK").parse_constant("V1") == (True, -1)
    assert d.print_additional_blocks() == ""