"""phanalist: a static analyser for PHP projects.

Submodules
----------
syntax, grammar, parser
    PHP syntax tree, PEG grammar and tree builder.

source
    ``SourceFile``: one parsed file with its namespace and FQN.

flatten, complexity, type_flow
    Statement flattening, complexity scores and method-chain type
    tracking used by the rules.

rules
    The rule contract and the built-in rules (E0001 – E0014).

analyse, results, output, config
    Orchestration, discovery, results, reporting and configuration.
"""

__version__ = "0.1.0"
