"""Clipboard collector (opt-in, redactable)."""

from agentctx.collectors.base import BaseCollector, CollectorRegistry
from agentctx.core.errors import CollectorTimeout
from agentctx.core.redact import redacted_fields
from agentctx.models.options import CollectOptions
from agentctx.models.report import Clipboard
from agentctx.models.result import CollectorResult

# (command, args) tried in order on Linux.
LINUX_CLIPBOARD_TOOLS: tuple[tuple[str, list[str]], ...] = (
    ("xclip", ["-selection", "clipboard", "-o"]),
    ("xsel", ["--clipboard", "--output"]),
    ("wl-paste", ["--no-newline"]),
)

# AppleScript class codes reported by "clipboard info" mapped to MIME types.
MAC_CLIPBOARD_TYPES: dict[str, str] = {
    "«class utf8»": "text/plain",
    "string": "text/plain",
    "Unicode text": "text/plain",
    "«class RTF »": "text/rtf",
    "«class HTML»": "text/html",
    "«class PNGf»": "image/png",
    "TIFF picture": "image/tiff",
    "«class furl»": "text/uri-list",
}


def parse_clipboard_info(stdout: str) -> list[str]:
    """Map ``osascript -e 'clipboard info'`` output to distinct MIME types.

    The output is a flat list like ``«class utf8», 12, string, 12``.
    """
    types: list[str] = []
    for part in stdout.split(","):
        mime = MAC_CLIPBOARD_TYPES.get(part.strip())
        if mime and mime not in types:
            types.append(mime)
    return types


@CollectorRegistry.register
class ClipboardCollector(BaseCollector[Clipboard]):
    """Collects clipboard text, redacted on request."""

    category = "clipboard"

    def empty_data(self) -> Clipboard:
        return Clipboard(available=False, types=[])

    def collect_darwin(self, options: CollectOptions) -> CollectorResult[Clipboard]:
        warnings: list[str] = []
        info = self.run("osascript", ["-e", "clipboard info"], options)
        if info.timed_out:
            raise CollectorTimeout(command="osascript")
        types = parse_clipboard_info(info.stdout) if info.ok else []
        if not info.ok:
            warnings.append(f"clipboard: could not read clipboard types: {info.stderr.strip() or 'unknown'}")

        text = self.run_checked("pbpaste", [], options)
        if text and "text/plain" not in types:
            types.insert(0, "text/plain")
        return CollectorResult(data=self._build(text, types, options), warnings=warnings)

    def collect_linux(self, options: CollectOptions) -> CollectorResult[Clipboard]:
        for command, args in LINUX_CLIPBOARD_TOOLS:
            result = self.run(command, args, options)
            if result.timed_out:
                raise CollectorTimeout(command=command)
            if result.ok:
                types = ["text/plain"] if result.stdout else []
                return CollectorResult(data=self._build(result.stdout, types, options))

        return CollectorResult(
            data=self.empty_data(),
            warnings=["clipboard: no clipboard tool available (install xclip, xsel or wl-clipboard)"],
        )

    def _build(self, text: str, types: list[str], options: CollectOptions) -> Clipboard:
        fields = redacted_fields("text", text, options.redact) if text else {}
        return Clipboard(available=True, types=types, **fields)
