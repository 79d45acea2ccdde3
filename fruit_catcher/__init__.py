"""
Fruit Catcher
=============

A terminal arcade game: catch the falling fruit with the basket.

This package contains the game logic, persistence, rendering and session
flow. Tunable parameters (board size, basket, speeds, key bindings,
record names) are in game_config.yaml.
"""
