# Build-time tooling for the Lox package.
