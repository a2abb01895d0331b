from bastion.units.base import EnemyKind, EnemyStats


class Normal(EnemyKind):
    """Baseline walker.  Also the fallback profile for unknown kind tags."""
    kind_id = "normal"
    display_name = "Normal"
    color = "red"
    stats = EnemyStats(hp=10, radius=15.0, speed=50.0)


class Fast(EnemyKind):
    kind_id = "fast"
    display_name = "Fast"
    color = "orange"
    stats = EnemyStats(hp=5, radius=10.0, speed=80.0)


class Tank(EnemyKind):
    """Slow, heavily armored.  Takes five hits at default damage."""
    kind_id = "tank"
    display_name = "Tank"
    color = "purple"
    stats = EnemyStats(hp=50, radius=25.0, speed=30.0)
