"""
Dairy-Free Donny
================

An arcade game about a boy who must eat enough to stay fed while dodging
the foods he is allergic to.

- donny_core: the level/actor simulation, session state machine, config,
  Gymnasium wrapper and headless renderer
- evaluation: runs agents over a fixed seed bank

All tunable parameters are in game_config.yaml.
"""
