"""Output listings as text columns or CSV."""

__all__ = [
    'Formats',
    'Formatter',
]

import csv
import enum


class Formats(enum.Enum):
    CSV = enum.auto()
    TEXT = enum.auto()


class Formatter:

    def __init__(
        self,
        columns,
        *,
        format=Formats.TEXT,  # pylint: disable=redefined-builtin
        header=True,
    ):
        self._columns = columns
        self._format = format
        self._header = header
        self._rows = []

    @classmethod
    def from_config(cls, columns, config):
        return cls(
            columns,
            format=Formats[config['output.format'].upper()],
            header=config['output.header'],
        )

    def append(self, *row):
        if len(row) != len(self._columns):
            raise ValueError(
                'expect %d columns: %r' % (len(self._columns), row)
            )
        self._rows.append([str(cell) for cell in row])

    def output(self, output_file):
        if self._format is Formats.CSV:
            writer = csv.writer(output_file, lineterminator='\n')
            if self._header:
                writer.writerow(self._columns)
            writer.writerows(self._rows)
            return
        rows = [self._columns] if self._header else []
        rows.extend(self._rows)
        if not rows:
            return
        widths = [max(map(len, cells)) for cells in zip(*rows)]
        for row in rows:
            line = '  '.join(
                cell.ljust(width) for cell, width in zip(row, widths)
            )
            output_file.write(line.rstrip())
            output_file.write('\n')
