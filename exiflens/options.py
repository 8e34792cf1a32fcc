# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Parse options

Options tune how the parsers walk a buffer. They are fixed for the
duration of a parse call and never modified by the parsers themselves.

Copyright 2025 DNAi inc.
"""

from typing import Dict, Any, Optional


def available_options() -> Dict[str, Dict[str, Any]]:
    """
    Return a dictionary of available parse options.

    Returns:
        Dictionary mapping option names to their metadata:
        {
            'OptionName': {
                'description': 'Description of the option',
                'type': 'bool|str|int|float',
                'default': default_value,
                'supported': True|False
            },
            ...
        }
    """
    return {
        'DecodeGPS': {
            'description': 'Walk the GPS sub-IFD and emit GPS position tags',
            'type': 'bool',
            'default': True,
            'supported': True
        },
        'VerifyCRC': {
            'description': 'Check PNG chunk CRC-32 values and record mismatches',
            'type': 'bool',
            'default': True,
            'supported': True
        },
        'PrintableRatio': {
            'description': 'Minimum share of printable bytes for a generic APPn segment to be stored as text',
            'type': 'float',
            'default': 0.8,
            'supported': True
        },
        'MaxInflateSize': {
            'description': 'Maximum number of bytes produced when inflating a compressed text chunk',
            'type': 'int',
            'default': 16 * 1024 * 1024,
            'supported': True
        },
        'MaxIFDDepth': {
            'description': 'Maximum nesting depth of EXIF/GPS sub-IFD pointers',
            'type': 'int',
            'default': 8,
            'supported': True
        },
    }


class ParseOptions:
    """
    Option set handed to parse_image() and the format parsers.

    Example:
        >>> options = ParseOptions(DecodeGPS=False)
        >>> options.set_option('PrintableRatio', '0.9')
        >>> options.get_option('PrintableRatio')
        0.9
    """

    def __init__(self, **overrides: Any):
        self.options: Dict[str, Any] = {}
        self._initialize_default_options()
        for option_name, value in overrides.items():
            self.set_option(option_name, value)

    def _initialize_default_options(self) -> None:
        for option_name, option_info in available_options().items():
            if 'default' in option_info:
                self.options[option_name] = option_info['default']

    def set_option(self, option_name: str, value: Any) -> None:
        """
        Set an option value.

        Args:
            option_name: Name of the option (e.g., 'DecodeGPS', 'PrintableRatio')
            value: Value to set for the option

        Raises:
            ValueError: If option name is not recognized or the value has the wrong type
        """
        available = available_options()
        if option_name not in available:
            raise ValueError(f"Unknown option: {option_name}. Use available_options() to see valid options.")

        expected_type = available[option_name].get('type')
        if expected_type == 'bool' and not isinstance(value, bool):
            # Accept 'true'/'false' strings from the command line
            if isinstance(value, str):
                value = value.lower() in ('true', '1', 'yes', 'on')
            else:
                value = bool(value)
        elif expected_type == 'int':
            if not isinstance(value, int):
                try:
                    value = int(value)
                except (ValueError, TypeError):
                    raise ValueError(f"Option {option_name} requires int value, got {type(value).__name__}")
            if value < 1:
                raise ValueError(f"Option {option_name} must be at least 1, got {value}")
        elif expected_type == 'float' and not isinstance(value, float):
            try:
                value = float(value)
            except (ValueError, TypeError):
                raise ValueError(f"Option {option_name} requires float value, got {type(value).__name__}")

        self.options[option_name] = value

    def get_option(self, option_name: str, default: Any = None) -> Any:
        return self.options.get(option_name, default)


def resolve_options(options: Optional[ParseOptions]) -> ParseOptions:
    """Return options, or a fresh default option set when None."""
    return options if options is not None else ParseOptions()
