"""Stepwise Execution Library

Declarative workflow interpretation on Temporal.

Core Components:
- Models: workflow definitions, steps and execution payloads
- DSL: variable scopes, conditions, fetch providers, the step interpreter
  and the child workflow composer
- Activities: ``setup_activity`` and the per-invocation activity context
- Workflows: the ``DSLWorkflow`` Temporal workflow and its dispatcher

Nothing is imported here: the workflow sandbox re-imports this package for
every run, so import what you need from the submodules directly.
"""
