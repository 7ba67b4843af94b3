"""Client for the dodgeball simulation service.

Parses scenario documents, runs every case through the RunSimulation gRPC
method and formats the answers.
"""
