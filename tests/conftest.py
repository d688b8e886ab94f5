import pytest
from mathutils import Matrix

from collada_export import (
    Animation,
    AnimationChannel,
    Bone,
    ExportLogger,
    Keyframe,
    Material,
    Mesh,
    Node,
    Scene,
    VertexWeight,
)
from collada_export.core.identifiers import IdentifierRegistry
from collada_export.formats.xml_utils import DocumentBuilder
from collada_export.scene.hierarchy import NodeArena


def make_registry(scene):
    registry = IdentifierRegistry(scene, NodeArena(scene.nodes))
    registry.assign_node_ids()
    return registry


@pytest.fixture
def log():
    return ExportLogger()


@pytest.fixture
def builder():
    return DocumentBuilder("COLLADA")


@pytest.fixture
def quad_scene():
    """One root node 'Root' with one unnamed 4-vertex quad, no material."""
    mesh = Mesh(
        positions=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
        faces=[[0, 1, 2, 3]],
    )
    return Scene(nodes=[Node(name="Root", meshes=[0])], meshes=[mesh])


@pytest.fixture
def skinned_scene():
    """
    Armature -> Hips -> Spine joints and a skinned triangle pair.

    Vertex 0 is bound to both bones, vertex 3 to none.
    """
    mesh = Mesh(
        name="Body",
        positions=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
        faces=[[0, 1, 2], [0, 2, 3]],
        bones=[
            Bone(name="Hips",
                 offset_matrix=Matrix.Translation((0.0, -1.0, 0.0)),
                 weights=[VertexWeight(0, 0.5), VertexWeight(1, 1.0)]),
            Bone(name="Spine",
                 offset_matrix=Matrix.Translation((0.0, -2.0, 0.0)),
                 weights=[VertexWeight(0, 0.5), VertexWeight(2, 1.0)]),
        ],
    )
    spine = Node(name="Spine", transform=Matrix.Translation((0.0, 1.0, 0.0)))
    hips = Node(name="Hips", transform=Matrix.Translation((0.0, 1.0, 0.0)),
                children=[spine])
    body = Node(name="Body", meshes=[0])
    armature = Node(name="Armature", children=[hips, body])
    return Scene(nodes=[armature], meshes=[mesh], materials=[Material(name="Skin")])


@pytest.fixture
def animated_scene():
    mover = Node(name="Mover")
    animation = Animation(
        name="Slide",
        ticks_per_second=25.0,
        channels=[
            AnimationChannel(node_name="Mover", keyframes=[
                Keyframe(time=0.0, position=(0.0, 0.0, 0.0)),
                Keyframe(time=25.0, position=(2.0, 0.0, 0.0)),
            ]),
            AnimationChannel(node_name="Mover", keyframes=[]),
        ],
    )
    return Scene(nodes=[mover], animations=[animation])
