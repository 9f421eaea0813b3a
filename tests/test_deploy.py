"""
Tests for the deploy.py entry point
"""

import pytest
from pathlib import Path
from unittest.mock import Mock, AsyncMock, patch

import deploy
from deployer.errors import ConfigurationError, SubmissionError
from deployer.orchestrator import Deployed, Failed

CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class TestMain:

    @pytest.mark.asyncio
    async def test_success_exit_code(self, config):
        orchestrator = Mock()
        orchestrator.run = AsyncMock(return_value=Deployed('DAOVoting', CONTRACT_ADDRESS, b'\x01'))

        with patch('deploy.build_orchestrator', return_value=orchestrator):
            assert await deploy.main(config) == 0

    @pytest.mark.asyncio
    async def test_failure_goes_to_stderr(self, config, capsys):
        error = SubmissionError("insufficient funds")
        orchestrator = Mock()
        orchestrator.run = AsyncMock(return_value=Failed(error.stage, error))

        with patch('deploy.build_orchestrator', return_value=orchestrator):
            exit_code = await deploy.main(config)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "insufficient funds" in captured.err
        assert "deployed to" not in captured.out

    @pytest.mark.asyncio
    async def test_unresolvable_artifact(self, config, tmp_path, capsys):
        config['artifacts_dir'] = str(tmp_path / "artifacts")
        config['network']['rpc_url'] = 'http://127.0.0.1:1'

        exit_code = await deploy.main(config)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out.splitlines() == ["Deploying DAOVoting contract..."]
        assert "[resolve]" in captured.err

    @pytest.mark.asyncio
    async def test_invalid_key_fails_before_run(self, config, capsys):
        config['deployer_private_key'] = 'not-a-key'

        exit_code = await deploy.main(config)

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "[configuration]" in captured.err

    @pytest.mark.asyncio
    async def test_config_load_failure(self, capsys):
        error = ConfigurationError("gas_limit must be a number, got 'lots'")

        with patch('deploy.load_config', side_effect=error), \
                patch('deploy.build_orchestrator') as build:
            exit_code = await deploy.main()

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "[configuration] gas_limit" in captured.err
        build.assert_not_called()


class TestBuildOrchestrator:

    def test_wires_configured_contract(self, config):
        config['contract_name'] = 'Treasury'
        config['constructor_args'] = [1]

        orchestrator = deploy.build_orchestrator(config)

        assert orchestrator.contract_name == 'Treasury'
        assert orchestrator.constructor_args == [1]
        assert orchestrator.resolver.artifacts_dir == 'artifacts'


class TestCli:

    def test_exit_status(self):
        with patch('deploy.configure_logging'), \
                patch('deploy.main', new=AsyncMock(return_value=1)):
            with pytest.raises(SystemExit) as exc_info:
                deploy.cli()

        assert exc_info.value.code == 1

    def test_unexpected_error_exits_one(self, capsys):
        with patch('deploy.configure_logging'), \
                patch('deploy.main', new=AsyncMock(side_effect=RuntimeError("provider exploded"))):
            with pytest.raises(SystemExit) as exc_info:
                deploy.cli()

        assert exc_info.value.code == 1
        assert "provider exploded" in capsys.readouterr().err

    def test_interrupt_exits_130(self, capsys):
        with patch('deploy.configure_logging'), \
                patch('deploy.main', new=Mock()), \
                patch('deploy.asyncio.run', side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                deploy.cli()

        assert exc_info.value.code == 130
        assert "deployed to" not in capsys.readouterr().out


class TestPackaging:

    def test_installs_only_project_namespace(self):
        tomllib = pytest.importorskip("tomllib")
        pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"

        with open(pyproject, 'rb') as f:
            setuptools = tomllib.load(f)['tool']['setuptools']

        assert setuptools['py-modules'] == ['deploy']
        assert all(p == 'deployer' or p.startswith('deployer.') for p in setuptools['packages'])
