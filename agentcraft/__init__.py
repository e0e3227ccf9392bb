"""AgentCraft — evaluation and scoring engine for the agent-building game.

Estimate how an assembled agent configuration handles each test scenario of
a level, score the run, and detect the component combos it earns.
"""

__version__ = "0.1.0"
