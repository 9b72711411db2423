# tests/conftest.py
"""Shared PHP snippets and helpers for the phanalist test-suite."""

from typing import Dict, List, Optional

import pytest

from phanalist.analyse import Analyse
from phanalist.config import Config
from phanalist.results import Violation
from phanalist.source import SourceFile


# ─────────────────────────────────────────────────────────────────────────
#  PHP snippets
# ─────────────────────────────────────────────────────────────────────────

CLEAN_CLASS_PHP = """<?php

namespace App\\Model;

class Invoice
{
    public const STATUS = 'open';

    private int $total = 0;

    public function getTotal(): int
    {
        return $this->total;
    }
}
"""

LOWERCASE_CLASS_PHP = """<?php

class foo
{
    public function bar()
    {
        return 42;
    }
}
"""

NESTED_IFS_PHP = """<?php

class Nested
{
    public function deep($a): void
    {
        if ($a) {
            if ($a) {
                if ($a) {
                    if ($a) {
                        if ($a) {
                            echo 'deep';
                        }
                    }
                }
            }
        }
    }
}
"""

FLUENT_PHP = """<?php

class QueryBuilder
{
    public function select(string $columns): self
    {
        return $this;
    }

    public function where(string $condition): self
    {
        return $this;
    }

    public function limit(int $n): static
    {
        return $this;
    }

    public function build(): string
    {
        return $this->select('*')->where('id = 1')->limit(10)->build();
    }
}
"""

TRAIT_FLUENT_PHP = """<?php

trait FluentTrait
{
    public function withName(string $name): self
    {
        return $this;
    }

    public function withValue(int $val): self
    {
        return $this;
    }
}

class Builder
{
    use FluentTrait;

    public function build(): string
    {
        return $this->withName('foo')->withValue(42)->build();
    }
}
"""

FOREIGN_CHAIN_PHP = """<?php

class Order
{
    public function getCustomer(): Customer
    {
        return new Customer();
    }

    public function process(): void
    {
        // getCustomer() hands back a Customer
        $name = $this->getCustomer()->getName();
    }
}

class Customer
{
    public function getName(): string
    {
        return 'Alice';
    }
}
"""

CROSS_CLASS_PHP = """<?php

class OrderService
{
    private CustomerRepository $customerRepo;

    public function process(int $orderId): void
    {
        $name = $this->customerRepo->getCustomer($orderId)->getName();
    }
}

class Importer
{
    public function run(): void
    {
        $builder = new Builder();
        $result = $builder->query()->execute();
    }
}

class Builder
{
    public function query(): Query { return new Query(); }
}

class Query
{
    public function execute(): array { return []; }
}
"""

MUTABLE_SERVICE_PHP = """<?php

namespace App\\Service;

class Counter
{
    private int $counter = 0;
    private array $cache = [];
    private static int $instances = 0;

    public function __construct(private bool $debug = false)
    {
        $this->counter = 1;
    }

    public function increment(): void
    {
        $this->counter++;
    }

    public function remember(string $key, string $value): void
    {
        $this->cache[$key] = $value;
    }

    public static function register(): void
    {
        self::$instances += 1;
    }

    public function read(string $key): ?string
    {
        return $this->cache[$key] ?? null;
    }
}
"""


# ─────────────────────────────────────────────────────────────────────────
#  Helpers
# ─────────────────────────────────────────────────────────────────────────

def analyse_php(
    content: str,
    path: str = "src/Example.php",
    rules: Optional[Dict[str, object]] = None,
    enabled_rules: Optional[List[str]] = None,
) -> List[Violation]:
    """Run the built-in rules over *content*."""
    config = Config(rules=dict(rules or {}), enabled_rules=list(enabled_rules or []))
    return Analyse(config).analyse_source(path, content)


def codes(violations: List[Violation]) -> List[str]:
    return [violation.rule for violation in violations]


def only(violations: List[Violation], code: str) -> List[Violation]:
    return [violation for violation in violations if violation.rule == code]


# ─────────────────────────────────────────────────────────────────────────
#  Fixtures
# ─────────────────────────────────────────────────────────────────────────

@pytest.fixture
def php_tree(tmp_path):
    """A small source tree: one clean file, one dirty file, one non-PHP file."""
    src = tmp_path / "src"
    (src / "Model").mkdir(parents=True)
    (src / "Model" / "Invoice.php").write_text(CLEAN_CLASS_PHP, encoding="utf-8")
    (src / "foo.php").write_text(LOWERCASE_CLASS_PHP, encoding="utf-8")
    (src / "README.md").write_text("# not php\n", encoding="utf-8")
    return src


@pytest.fixture
def source_file():
    def _parse(content: str, path: str = "src/Example.php") -> SourceFile:
        return SourceFile.parse(path, content)
    return _parse
