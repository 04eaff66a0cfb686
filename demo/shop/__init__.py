"""Sample shop application wired by izumi-codegen."""
