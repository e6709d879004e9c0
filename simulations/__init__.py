# simulations/__init__.py
"""
Monte Carlo simulations for the balanced-outcomes repo.

Run comparisons via:
    python -m simulations.compare --method-a iid --method-b balanced --weights a=1,b=2,c=3,d=4 --rolls 100
"""
