"""branch-format: format only the changes of a git branch.

Wraps git-clang-format so that formatting is limited to the lines a branch
or the staging area changed, never whole files.

Usage:
    branch-format <command> [options]
    python -m branchfmt <command> [options]

Structure:
    branchfmt/
    ├── __main__.py          # Entry point dispatcher
    ├── config.py            # Config dataclass, YAML and environment loading
    ├── errors.py            # Exception hierarchy
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── formatting.py    # FormatRequest, FormatResult, output classification
    │   ├── compliance.py    # CheckOutput, ComplianceVerdict
    │   └── rewrite.py       # CommitRecord, RewritePlan, rewrite_commit
    ├── services/            # Business logic services
    │   ├── git_operations.py
    │   ├── baseline_resolver.py
    │   ├── format_invoker.py
    │   ├── branch_formatter.py
    │   ├── compliance_checker.py
    │   └── history_rewriter.py
    ├── infrastructure/      # External system interactions
    │   ├── runner.py
    │   ├── programs.py
    │   └── terminal.py
    └── commands/            # Thin command orchestrators
"""

__version__ = "0.1.0"
