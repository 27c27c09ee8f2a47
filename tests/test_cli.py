from unipddl.cli import main
from unipddl.domain import Domain
from unipddl.instance import Instance

DOMAIN_TEXT = """(define (domain simple)
  (:requirements :strips :typing)
  (:types truck place)
  (:predicates (at ?t - truck ?p - place))
  (:action move
    :parameters (?t - truck ?a - place ?b - place)
    :precondition (and (at ?t ?a))
    :effect (and (not (at ?t ?a)) (at ?t ?b)))
)
"""

INSTANCE_TEXT = """(define (problem p1)
  (:domain simple)
  (:objects t1 - truck a b - place)
  (:init (at t1 a))
  (:goal (and (at t1 b)))
)
"""


def write_files(tmp_path):
    dom = tmp_path / "dom.pddl"
    ins = tmp_path / "ins.pddl"
    dom.write_text(DOMAIN_TEXT)
    ins.write_text(INSTANCE_TEXT)
    return dom, ins


def test_prints_domain_and_instance(tmp_path, capsys):
    dom, ins = write_files(tmp_path)
    assert main([str(dom), str(ins)]) == 0
    out = capsys.readouterr().out
    domain = Domain(dom)
    instance = Instance(domain, ins)
    assert out == str(domain) + "\n" + str(instance) + "\n"
    assert out.startswith("( DEFINE ( DOMAIN SIMPLE )\n")
    assert "( DEFINE ( PROBLEM P1 )\n" in out


def test_usage_without_arguments(capsys):
    assert main([]) == 1
    assert capsys.readouterr().out == "Usage: ./Domain <domain.pddl> <task.pddl>\n"


def test_usage_with_one_argument(tmp_path, capsys):
    dom, _ = write_files(tmp_path)
    assert main([str(dom)]) == 1
    assert capsys.readouterr().out.startswith("Usage:")


def test_missing_file_fails(tmp_path, capsys):
    dom, _ = write_files(tmp_path)
    assert main([str(dom), str(tmp_path / "missing.pddl")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error:")


def test_bad_problem_fails(tmp_path, capsys):
    dom, ins = write_files(tmp_path)
    ins.write_text(INSTANCE_TEXT.replace("(at t1 a)", "(at t9 a)"))
    assert main([str(dom), str(ins)]) == 1
    assert capsys.readouterr().err.startswith("error:")