from geovisits.models import Visit


def test_reregister_command(app, make_zone, monitor):
    zone = make_zone()
    monitor.forget_all()

    result = app.test_cli_runner().invoke(args=['reregister'])

    assert result.exit_code == 0
    assert f'zone {zone.id}: registered' in result.output
    assert '1/1 zone(s) registered' in result.output
    assert monitor.registered_ids() == [zone.id]


def test_reregister_command_reports_failures(app, make_zone, monitor):
    make_zone()
    monitor.background_permission = False

    result = app.test_cli_runner().invoke(args=['reregister'])

    assert 'FAILED (permission_denied' in result.output
    assert '0/1 zone(s) registered' in result.output


def test_transition_command(app, make_zone):
    zone = make_zone()
    runner = app.test_cli_runner()

    result = runner.invoke(args=['transition', str(zone.id), 'enter'])
    assert 'recorded as visit' in result.output
    result = runner.invoke(args=['transition', str(zone.id), 'enter'])
    assert 'ignored' in result.output
    assert Visit.query.count() == 1
