from logfacet import __version__

logfacet_description = f"""logfacet v{__version__}
Supported placeholders:
  %{{id}}  %{{time}}  %{{time:LAYOUT}}  %{{module}}  %{{filename}}  %{{file}}
  %{{line}}  %{{level}}  %{{lvl}}  %{{message}}
"""

COMPILE_TEST_DATA = [
    (
        "#%{id} %{time} %{filename}:%{line} ▶ %{lvl} %{message}",
        "render: #%(id)d %(time)s %(filename)s:%(line)d ▶ %(level).3s %(message)s\n"
        "time layout: %Y-%m-%d %H:%M:%S\n",
    ),
    (
        "%{time:%H:%M} 100% %{message}",
        "render: %(time)s 100%% %(message)s\ntime layout: %H:%M\n",
    ),
    ("%{lvl}", "render: #%(id)d %(time)s %(filename)s:%(line)d ▶ %(level).3s %(message)s\n"
               "time layout: %Y-%m-%d %H:%M:%S\n"),
]
COMPILE_TEST_IDS = ["default template", "time layout and literal percent", "too short"]

EMIT_TEST_DATA = [
    (["--no-color", "-f", "%{lvl} %{module} %{message}", "-m", "svc", "-l", "warning", "disk", "low"],
     "WAR svc disk low\n"),
    (["--no-color", "-f", "%{level}: %{message}", "--prefix", "> ", "hello"], "> INFO: hello\n"),
    (["--color", "-f", "%{lvl} %{message}", "-l", "error", "boom"], "\x1b[31mERR boom\x1b[0m\n"),
    (["--no-color", "-f", "%{lvl} %{message}", "--threshold", "error", "-l", "info", "quiet"], ""),
]
EMIT_TEST_IDS = ["module and level", "prefix", "color", "filtered by threshold"]
