# unipddl

A parser for PDDL planning domains and problem instances. It reads a
domain file and a problem file and builds an object model of them. The
model holds the types, constants, objects, predicates, functions and
actions, including durative actions and derived predicates. It can print
the model back as normalised PDDL. Names and keywords come out in upper
case and comments are dropped.

Recognised requirements are `:strips`, `:adl`, `:typing`,
`:negative-preconditions`, `:conditional-effects`, `:equality`,
`:action-costs`, `:durative-actions`, `:non-deterministic`,
`:universal-preconditions`, `:fluents`, `:disjunctive-preconditions` and
`:derived-predicates`.

Conditions and effects may use `and`, `or`, `not`, `oneof`, `when`,
`exists`, `forall` and `=`. Effects may also use `increase` and
`decrease`, and arithmetic expressions may use `+ - * /`. Predicates inside
a `(:private ...)` section of `:predicates` are read as ordinary
predicates.

## Installation

```
pip install .
```

## Command line

```
unipddl domain.pddl problem.pddl
```

The command parses both files and prints the domain followed by the
problem. If either argument is missing, it prints a usage line and exits
with status 1. If a file cannot be read or contains a syntax error, it
prints the error to standard error and exits with status 1.

## Library use

```python
from unipddl.domain import Domain
from unipddl.instance import Instance

domain = Domain("domain.pddl")
instance = Instance(domain, "problem.pddl")

print(domain)
print(instance)

for action in domain.actions:
    print(action.name, [g.name for g in action.add_effects()])
```

### Parsing from strings

You can also parse from strings: create an empty `Domain()` and call
`Domain.parse_text`, or create `Instance(domain)` and call
`Instance.parse_text`.

### Objects live in the domain's types

The objects of a problem are stored in the domain's types. Parsing an
instance therefore adds to the type table of the domain it was given.

### Inspecting actions

`Action` offers these views of its precondition and effect:

- `precons()` and `effects()` return the top-level conjuncts.
- `add_effects()` and `delete_effects()` return the atoms the effect makes
  true and false.

`TemporalAction` adds `precons_start()`, `precons_overall()`,
`precons_end()`, `end_effects()`, `add_end_effects()`,
`delete_end_effects()` and `duration()`.

### Building in code

To build a domain in code, use these `Domain` methods:

- types and constants: `create_type`, `create_constant`
- predicates and functions: `create_predicate`, `create_function`
- actions: `create_action`, `add_params`
- preconditions: `set_pre`, `add_pre`, `add_or_pre`
- effects: `set_eff`, `add_eff`
- costs: `add_cost`, `add_function_cost`, `add_function_modifier`

To build a problem in code, use these `Instance` methods:

- `add_object`
- `add_init` for predicate facts
- `add_init_value` for function values: a float gives a numeric value, an
  int is taken as an object index
- `add_init_fluent`
- `add_goal`

### Errors

Syntax errors raise subclasses of `unipddl.filereader.PddlError`:
`ExpectedToken`, `UnknownToken` and `UnexpectedEOF`. Each one carries the
line and column where it happened. Semantic problems raise `PddlError`
itself, for example:

- types declared without `:typing`
- actions declared before any predicates
- a `:metric` in a domain that has neither durative actions nor action
  costs

## What it does not do

The package does not search for plans or check them. It only reads,
builds and writes domains and problems.

Goals must be a single fact or a conjunction of facts. The only metrics
read are `minimize (total-time)` and `minimize (total-cost)`.

## Tests

```
pip install .[test]
pytest
```