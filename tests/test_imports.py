import importlib

MODULES = [
    'politecrawl',
    'politecrawl.config',
    'politecrawl.container',
    'politecrawl.domain',
    'politecrawl.services.crawler',
    'politecrawl.services.worker',
    'politecrawl.services.protocols',
    'politecrawl.services.options_parser',
]

def test_imports():
    for m in MODULES:
        importlib.import_module(m)
