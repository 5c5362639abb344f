import logfacet

FAULT_MAPPING = dict(
    invalid_level="Invalid log level '{level}'. Must be one of: {levels}",
    invalid_output="Invalid output '{output}'. Must be one of: {outputs}",
    invalid_color="Invalid color '{color}'. Must be an integer (0 disables colored output).",
    missing_file_path="file_path required when output is 'file'",
    yaml_file_parse_issue="Error loading config file {file_path}: {error}",
    file_open_issue="Error occurred while opening the log file ({file_path}): {error}",
    invalid_config="Invalid logging configuration: {error}",
    invalid_text_option="Invalid {option} '{value}'. Must be a string.",
)

TOOL_VERSION = f"""logfacet v{logfacet.__version__}"""

TOOL_USAGE = """Supported placeholders:
  %{id}  %{time}  %{time:LAYOUT}  %{module}  %{filename}  %{file}
  %{line}  %{level}  %{lvl}  %{message}"""
