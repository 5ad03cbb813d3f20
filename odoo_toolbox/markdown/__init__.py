"""Testable code blocks in markdown documentation."""

from odoo_toolbox.markdown.extractor import (
    TestableBlock,
    extract_from_directory,
    extract_from_file,
    extract_from_string,
    filter_blocks,
    get_section_name,
    group_by_source_file,
)
from odoo_toolbox.markdown.runner import (
    ExampleRunner,
    Outcome,
    RunContext,
    RunResult,
    check_dependencies,
    evaluate_expect,
    execute_code_block,
)
