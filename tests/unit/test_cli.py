"""
Unit Tests for the admin CLI argument handling
"""
from thesis_archive.cli import create_parser, main


class TestParser:

    def test_create_admin_arguments(self):
        args = create_parser().parse_args(['create-admin', '-u', 'registrar', '-p', 'secret123'])

        assert args.command == 'create-admin'
        assert args.username == 'registrar'
        assert args.first_name == 'System'

    def test_serve_defaults(self):
        args = create_parser().parse_args(['serve'])

        assert args.host is None
        assert args.port is None
        assert args.reload is False

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert 'thesis-archive' in capsys.readouterr().out

    def test_short_admin_password_refused(self):
        assert main(['create-admin', '-u', 'registrar', '-p', '123']) == 1
