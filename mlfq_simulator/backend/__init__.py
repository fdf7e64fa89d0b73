"""
Simulation backend: data model, MLFQ engine, baseline engines and reporting.
"""
