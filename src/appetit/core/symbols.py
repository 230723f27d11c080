"""Language symbols and keywords referenced across the interpreter."""

# Separates a source/prompt argument from a destination/variable argument
SYMBOL_ACTION = "to"

# Lines whose first non-blank character is this are comments
SYMBOL_COMMENT = "-"

# Placeholder for a blank line after comment stripping
BLANK_LINE = " "

SYMBOL_ASSIGNMENT = "="

# Prefix shared by all runtime-computed (reserved) variables
RESERVED_PREFIX = "b_"

# Marker that introduces a variable reference inside a string (#name)
SUBSTITUTION_MARKER = "#"

SHEBANG = "#!"

MINVER_KEYWORD = "minver"
