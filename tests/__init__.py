"""
Test Suite for the Voronoi Diagram Mesh

This package contains unit tests and integration tests for:
- Diagram storage containers and the neighbor graph
- The build-cycle state machine and error taxonomy
- Diagram generation with both cell backends
- KD-tree region lookup
- Synthetic seed sets and the command line tool

Run tests with: pytest -v
"""
