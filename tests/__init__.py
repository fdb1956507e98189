"""
ClausingSIM Test Suite

Tests organized by:
- test_params.py: Parameter validation and result containers
- test_geometry.py: Region layout, intersections, straight-tube references
- test_launcher.py: Entry position and cosine-law sampling
- test_surfaces.py: Diffuse re-emission
- test_tracer.py: Per-particle state machine and batch kernel
- test_diagnostics.py: Tally reduction and plots
- test_simulation.py: End-to-end Clausing factor properties
- test_cli.py: Command-line entry point
- test_performance.py: Performance gates
"""
