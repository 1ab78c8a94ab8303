"""
Demo: python -m term_widgets

Shows a table of services, lets the user pick the ones to restart, then asks
for a reason and a delay in a form.
"""

from dataclasses import dataclass

from .backend import TerminalBackend
from .editables import editable
from .field_editor import FieldEditorWidget
from .selection import SelectionMode, SelectionWidget
from .table import TableWidget
from .windows import Region

SERVICES = [
    ('nginx', 'running', '12d'),
    ('postgres', 'running', '40d'),
    ('redis', 'stopped', '-'),
    ('worker', 'degraded', '3h'),
]


@dataclass
class Restart:
    reason: str = ''
    delay: int = 0


def main():
    backend = TerminalBackend()
    with backend.session():
        limits = backend.screen_limits()
        table = TableWidget(
            backend,
            ['Service', 'State', 'Uptime'],
            SERVICES,
            lambda row, column: row[column],
            Region(len(SERVICES) + 4, limits[1], 0, 0),
            auto_resize=True,
        )

        selector = SelectionWidget(
            backend,
            'Restart which services?',
            Region.centered(len(SERVICES) + 7, 40, limits),
            [name for name, _, _ in SERVICES],
            SelectionMode(centered=True, multi=True),
        )
        chosen = set()
        picked = selector.select(chosen)
        selector.close()

        restart = Restart()
        confirmed = False
        if picked:
            table.highlight_row(min(chosen))
            form = FieldEditorWidget(
                backend, 'Restart details',
                Region.centered(9, 50, limits),
                ['Reason', 'Delay (s)'],
            )
            confirmed = form.edit([editable(restart, 'reason'), editable(restart, 'delay')])
            form.close()
        table.close()

    if confirmed:
        names = ', '.join(SERVICES[i][0] for i in sorted(chosen))
        print(f'Restarting {names} in {restart.delay}s: {restart.reason}')
    else:
        print('Nothing restarted.')


if __name__ == '__main__':
    main()
