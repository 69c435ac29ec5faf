"""Application layer: the hook contract and question dispatch."""
