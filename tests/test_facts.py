import pytest

from unipddl.condition import Function, Lifted
from unipddl.facts import NumericGroundFunc, ObjectGroundFunc, TypeGround
from unipddl.filereader import Filereader, UnknownToken
from unipddl.tokens import TokenStruct
from unipddl.typesys import Type


class _Domain:
    def __init__(self):
        root = Type("OBJECT")
        root.objects.insert("A")
        root.objects.insert("B")
        root.constants.insert("C")
        self.types = TokenStruct([root])
        self.typed = False
        self.preds = TokenStruct([Lifted("P", [0, 0])])
        self.funcs = TokenStruct([Function("F", -1, [0]), Function("G", 0, [0])])


def _fact(dom, text):
    f = Filereader.from_text(text + "\n)")
    f.assert_token("(")
    fact = TypeGround(dom.preds.get(f.get_token(dom.preds)))
    fact.parse(f, dom.types[0].constants, dom)
    return fact


def _func(dom, text, cls):
    f = Filereader.from_text(text + "\n)")
    f.assert_token("(")
    f.assert_token("=")
    f.assert_token("(")
    func = cls(dom.funcs.get(f.get_token(dom.funcs)))
    func.parse(f, dom.types[0].constants, dom)
    return func


def test_type_ground_parse_objects_and_constants():
    dom = _Domain()
    fact = _fact(dom, "(p a c)")
    assert fact.params == [dom.types[0].parse_object("A")[1], -1]
    assert fact.pddl(0, TokenStruct(), dom) == "( P A C )"


def test_type_ground_round_trip():
    dom = _Domain()
    fact = _fact(dom, "(p b a)")
    again = _fact(dom, fact.pddl(1, TokenStruct(), dom))
    assert again.params == fact.params
    assert again.pddl(0, TokenStruct(), dom) == fact.pddl(0, TokenStruct(), dom)


def test_type_ground_unknown_object():
    dom = _Domain()
    with pytest.raises(UnknownToken):
        _fact(dom, "(p a zz)")


def test_type_ground_insert():
    dom = _Domain()
    fact = TypeGround(dom.preds.get("P"))
    fact.insert(dom, ["B", "C"])
    assert fact.params == [dom.types[0].parse_object("B")[1], dom.types[0].parse_constant("C")[1]]
    assert _fact(dom, fact.pddl(0, TokenStruct(), dom)).params == fact.params


def test_type_ground_insert_unknown():
    dom = _Domain()
    fact = TypeGround(dom.preds.get("P"))
    with pytest.raises(UnknownToken):
        fact.insert(dom, ["A", "NOPE"])


def test_numeric_function_parse_and_print():
    dom = _Domain()
    func = _func(dom, "(= (f a) 3.7)", NumericGroundFunc)
    assert func.value == pytest.approx(3.7)
    assert func.params == [dom.types[0].parse_object("A")[1]]
    assert func.pddl(0, TokenStruct(), dom) == "( = ( F A ) 3 )"


def test_numeric_function_bad_value():
    dom = _Domain()
    with pytest.raises(UnknownToken):
        _func(dom, "(= (f a) xyz)", NumericGroundFunc)


def test_object_function_parse_and_print():
    dom = _Domain()
    func = _func(dom, "(= (g a) b)", ObjectGroundFunc)
    assert func.value == dom.types[0].parse_object("B")[1]
    assert "(B,0)" in func.pddl(0, TokenStruct(), dom)


def test_object_function_constant_value():
    dom = _Domain()
    func = _func(dom, "(= (g b) c)", ObjectGroundFunc)
    assert func.value == dom.types[0].parse_constant("C")[1]
    assert dom.types[0].object(func.value)[0] == "C"


def test_object_function_unknown_value():
    dom = _Domain()
    with pytest.raises(UnknownToken):
        _func(dom, "(= (g a) missing)", ObjectGroundFunc)