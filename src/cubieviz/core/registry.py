# The registry of cubie grouping strategies
GROUPING_REGISTRY = {}

# The registry of renderer class
RENDERER_REGISTRY = {}

def register_grouping(kind: str):
    def deco(cls):
        GROUPING_REGISTRY[kind] = cls
        return cls
    return deco

def register_renderer(kind: str):
    def deco(cls):
        RENDERER_REGISTRY[kind] = cls
        return cls
    return deco
