"""Shared descriptor samples for godesc tests."""

import pytest


EXPLOSION_GO = '''components {
  id: "explosion"
  component: "/main/scripts/ghscripts/explosion.script"
}
embedded_components {
  id: "sprite"
  type: "sprite"
  data: "default_animation: \\"explode\\"\\n"
  "material: \\"/builtins/materials/sprite.material\\"\\n"
  "textures {\\n"
  "  sampler: \\"texture_sampler\\"\\n"
  "  texture: \\"/main/atlases/ghatlases/sprites.atlas\\"\\n"
  "}\\n"
  ""
  scale {
    x: 0.5
    y: 0.5
    z: 1.0E-6
  }
}
'''

GUY_GO = '''components {
  id: "script"
  component: "/main/scripts/ghscripts/guy.script"
}
embedded_components {
  id: "sprite"
  type: "sprite"
  data: "default_animation: \\"Idle\\"\\n"
  "material: \\"/builtins/materials/sprite.material\\"\\n"
  "textures {\\n"
  "  sampler: \\"texture_sampler\\"\\n"
  "  texture: \\"/main/atlases/ghatlases/sprites.atlas\\"\\n"
  "}\\n"
  ""
  position {
    z: 0.7
  }
}
embedded_components {
  id: "projectile_factory"
  type: "factory"
  data: "prototype: \\"/main/gameobjects/ghgameobjects/projectile.go\\"\\n"
  ""
}
'''

LOADER_GO = '''components {
  id: "loader"
  component: "/main/scripts/loader.script"
}
embedded_components {
  id: "login_proxy"
  type: "collectionproxy"
  data: "collection: \\"/main/collections/login.collection\\"\\n"
  ""
}
embedded_components {
  id: "game_proxy"
  type: "collectionproxy"
  data: "collection: \\"/main/scripts/ghscripts/game.collection\\"\\n"
  ""
}
'''

PLATFORM_GO = '''components {
  id: "platform"
  component: "/main/runner_stan-main/level/objects/desk_platform.script"
}
embedded_components {
  id: "collisionobject"
  type: "collisionobject"
  data: "type: COLLISION_OBJECT_TYPE_KINEMATIC\\n"
  "mass: 0.0\\n"
  "friction: 0.1\\n"
  "restitution: 0.5\\n"
  "group: \\"geometry\\"\\n"
  "mask: \\"hero\\"\\n"
  "embedded_collision_shape {\\n"
  "  shapes {\\n"
  "    shape_type: TYPE_BOX\\n"
  "    position {\\n"
  "    }\\n"
  "    rotation {\\n"
  "    }\\n"
  "    index: 0\\n"
  "    count: 3\\n"
  "    id: \\"Box\\"\\n"
  "  }\\n"
  "  data: 194.54225\\n"
  "  data: 82.45355\\n"
  "  data: 10.0\\n"
  "}\\n"
  ""
}
'''

STAR_GO = '''components {
  id: "script"
  component: "/main/spaceShooterGame-main/stars/star.script"
}
components {
  id: "pickup"
  component: "/main/spaceShooterGame-main/stars/pickup.particlefx"
}
embedded_components {
  id: "collisionobject"
  type: "collisionobject"
  data: "type: COLLISION_OBJECT_TYPE_KINEMATIC\\n"
  "mass: 0.0\\n"
  "friction: 0.1\\n"
  "restitution: 0.5\\n"
  "group: \\"default\\"\\n"
  "mask: \\"default\\"\\n"
  "embedded_collision_shape {\\n"
  "  shapes {\\n"
  "    shape_type: TYPE_SPHERE\\n"
  "    position {\\n"
  "      y: -3.5058432\\n"
  "    }\\n"
  "    rotation {\\n"
  "    }\\n"
  "    index: 0\\n"
  "    count: 1\\n"
  "  }\\n"
  "  data: 20.742905\\n"
  "}\\n"
  ""
}
embedded_components {
  id: "sprite"
  type: "sprite"
  data: "default_animation: \\"star\\"\\n"
  "material: \\"/builtins/materials/sprite.material\\"\\n"
  "textures {\\n"
  "  sampler: \\"texture_sampler\\"\\n"
  "  texture: \\"/main/spaceShooterGame-main/stars/stars.atlas\\"\\n"
  "}\\n"
  ""
  position {
    z: 0.5
  }
}
'''

SAMPLES = {
    "explosion": EXPLOSION_GO,
    "guy": GUY_GO,
    "loader": LOADER_GO,
    "platform": PLATFORM_GO,
    "star": STAR_GO,
}


@pytest.fixture
def explosion_source():
    return EXPLOSION_GO


@pytest.fixture
def guy_source():
    return GUY_GO


@pytest.fixture
def loader_source():
    return LOADER_GO


@pytest.fixture
def platform_source():
    return PLATFORM_GO


@pytest.fixture
def star_source():
    return STAR_GO


@pytest.fixture(params=sorted(SAMPLES))
def sample_source(request):
    """Every engine-written sample in turn."""
    return SAMPLES[request.param]
