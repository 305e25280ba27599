"""Text and binary renderings of a framed LCD byte sequence."""

from ..models import ConversionConfig, ConversionResult, OutputFormat


def _hex_chunks(data: bytes, bytes_per_line: int) -> "list[list[str]]":
    return [
        [f"0x{byte:02X}" for byte in data[i : i + bytes_per_line]]
        for i in range(0, len(data), bytes_per_line)
    ]


def _metadata_lines(
    identifier: str, result: ConversionResult, size: int, has_header: bool = False
) -> "list[str]":
    lines = [
        "/*",
        f" * Image: {identifier}",
        f" * Width: {result.width}px",
        f" * Height: {result.height}px",
        f" * Format: {result.color_format.value}",
        f" * Scan Mode: {result.scan_mode.value}",
        f" * Size: {size} bytes",
    ]
    if has_header:
        lines.append(" * Includes Image2Lcd header")
    lines.append(" */")
    return lines


def format_c_array(
    data: bytes, result: ConversionResult, config: ConversionConfig
) -> str:
    """Render data as a C array definition with a metadata comment.

    Args:
        data: Framed bytes (header and palette included when requested)
        result: Conversion result the data was built from
        config: Supplies the identifier and line width

    Returns:
        C source text ending with a newline
    """
    identifier = config.identifier_name
    lines = _metadata_lines(identifier, result, len(data), config.include_header)
    lines.append("")
    lines.append(f"const unsigned char {identifier}[] = {{")

    chunks = _hex_chunks(data, config.bytes_per_line)
    for index, chunk in enumerate(chunks):
        line = "  " + ", ".join(chunk)
        if index < len(chunks) - 1:
            line += ","
        lines.append(line)

    lines.append("};")
    lines.append("")
    return "\n".join(lines)


def format_hex_text(data: bytes, bytes_per_line: int) -> str:
    """Render data as lines of space-separated 0xHH values."""
    return "\n".join(" ".join(chunk) for chunk in _hex_chunks(data, bytes_per_line))


def format_binary(data: bytes) -> bytes:
    """Raw dump; byte-identical to the framed sequence."""
    return bytes(data)


def generate_header_file(data: bytes, result: ConversionResult, identifier: str) -> str:
    """C header declaring the array produced by format_c_array."""
    guard = f"{identifier.upper()}_H"
    prefix = identifier.upper()
    lines = [f"#ifndef {guard}", f"#define {guard}", ""]
    lines += _metadata_lines(identifier, result, len(data))
    lines += [
        "",
        f"extern const unsigned char {identifier}[];",
        f"#define {prefix}_WIDTH {result.width}",
        f"#define {prefix}_HEIGHT {result.height}",
        f"#define {prefix}_SIZE {len(data)}",
        "",
        f"#endif // {guard}",
        "",
    ]
    return "\n".join(lines)


def render(
    data: bytes,
    result: ConversionResult,
    config: ConversionConfig,
    output_format: OutputFormat,
) -> "str | bytes":
    """Dispatch to the rendering for output_format."""
    if output_format is OutputFormat.BINARY:
        return format_binary(data)
    if output_format is OutputFormat.HEX_TEXT:
        return format_hex_text(data, config.bytes_per_line)
    return format_c_array(data, result, config)
