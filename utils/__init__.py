"""
Helpers around the Tree-BPE core.

Modules:
    tree_functionals  - Generic tree traversals
    loader            - Reading and writing raw JSON lines trees
    display           - Printing compressed trees and compression summaries
"""
