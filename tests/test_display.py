"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, MemoryAddressOutOfRange
from conftest import setup_sprite_in_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        state = fresh_state

        # Simple 2x2 box sprite
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(state, 0x300, sprite)

        # Set coordinates: V0=10, V1=5
        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300

        # Draw sprite: D012 (draw at V0,V1 with height 2)
        state = execute(state, 0xD012)

        # Check pixels are drawn
        assert state.display[10, 5] == 1  # Top-left
        assert state.display[11, 5] == 1  # Top-right
        assert state.display[10, 6] == 1  # Bottom-left
        assert state.display[11, 6] == 1  # Bottom-right
        assert state.display[12, 5] == 0  # Outside sprite
        assert jnp.sum(state.display) == 4

        # No collision should occur
        assert state.V[15] == 0
        assert state.redraw

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = fresh_state

        # Single pixel sprite
        sprite = [0x80]  # 10000000
        state = setup_sprite_in_memory(state, 0x400, sprite)

        # Set coordinates and I register
        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        # Draw first time - no collision
        state = execute(state, 0xD011)  # Draw height 1
        assert state.display[20, 10] == 1
        assert state.V[15] == 0  # No collision

        # Draw again at same location - should collision
        state = execute(state, 0xD011)  # Draw again
        assert state.display[20, 10] == 0  # Pixel erased by XOR
        assert state.V[15] == 1  # Collision detected!

    def test_xor_behavior(self, fresh_state):
        """Test XOR behavior - drawing twice should erase."""
        state = fresh_state

        sprite = [0xF0, 0x90, 0x90, 0x90, 0xF0]
        state = setup_sprite_in_memory(state, 0x500, sprite)

        state = execute(state, 0x6008)  # V0 = 8
        state = execute(state, 0x610F)  # V1 = 15
        state = execute(state, 0xA500)  # I = 0x500

        before = state.display

        # Draw first time
        state = execute(state, 0xD015)
        assert jnp.sum(state.display) == 14
        assert state.V[15] == 0  # No collision first time

        # Draw second time - should erase
        state = execute(state, 0xD015)
        assert jnp.array_equal(state.display, before)
        assert state.V[15] == 1  # Collision detected

    def test_partial_overlap_sets_collision(self, fresh_state):
        """Only pixels turned off count as a collision."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xC0])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA300)
        state = execute(state, 0xD011)  # pixels 0,1

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0xD011)  # pixels 1,2

        assert state.display[0, 0] == 1
        assert state.display[1, 0] == 0
        assert state.display[2, 0] == 1
        assert state.V[15] == 1

    def test_adjacent_sprites_do_not_collide(self, fresh_state):
        """Drawing next to lit pixels leaves VF clear."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xF0])

        state = execute(state, 0xA300)
        state = execute(state, 0xD011)  # pixels 0-3
        state = execute(state, 0x6004)  # V0 = 4
        state = execute(state, 0xD011)  # pixels 4-7

        assert jnp.sum(state.display) == 8
        assert state.V[15] == 0


class TestScreenWrapping:
    """Test sprite wrapping at the screen edges."""

    def test_right_edge_wraps(self, fresh_state):
        """Pixels past column 63 reappear at column 0."""
        state = setup_sprite_in_memory(fresh_state, 0x600, [0xFF])

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA600)  # I = 0x600

        state = execute(state, 0xD011)

        for x in (60, 61, 62, 63, 0, 1, 2, 3):
            assert state.display[x, 0] == 1
        assert state.display[4, 0] == 0
        assert jnp.sum(state.display) == 8

    def test_bottom_edge_wraps(self, fresh_state):
        """Rows past row 31 reappear at row 0."""
        state = setup_sprite_in_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA700)  # I = 0x700

        state = execute(state, 0xD013)  # Draw height 3

        assert state.display[0, 30] == 1
        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 1
        assert jnp.sum(state.display) == 3

    def test_corner_wraps_both_axes(self, fresh_state):
        """A sprite at the bottom-right corner wraps to all four corners."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xC0, 0xC0])

        state = execute(state, 0x603F)  # V0 = 63
        state = execute(state, 0x611F)  # V1 = 31
        state = execute(state, 0xA300)
        state = execute(state, 0xD012)

        assert state.display[63, 31] == 1
        assert state.display[0, 31] == 1
        assert state.display[63, 0] == 1
        assert state.display[0, 0] == 1
        assert jnp.sum(state.display) == 4

    def test_coordinate_wrapping(self, fresh_state):
        """Test coordinate wrapping with modulo."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0x80])

        # Set coordinates > screen size to test modulo
        state = execute(state, 0x6046)  # V0 = 70 (70 % 64 = 6)
        state = execute(state, 0x6125)  # V1 = 37 (37 % 32 = 5)
        state = execute(state, 0xA800)  # I = 0x800

        state = execute(state, 0xD011)

        # Should draw at (6, 5) due to modulo
        assert state.display[6, 5] == 1

    def test_wrapped_collision(self, fresh_state):
        """Collisions are detected on wrapped pixels too."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = state.replace(display=state.display.at[1, 0].set(True))

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0xA300)
        state = execute(state, 0xD011)

        assert state.display[1, 0] == 0
        assert state.V[15] == 1


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_different_sprite_heights(self, fresh_state):
        """Test sprites with different N values."""
        state = fresh_state

        # Multi-row sprite
        sprite = [0x80, 0x40, 0x20, 0x10, 0x08]  # Diagonal line
        state = setup_sprite_in_memory(state, 0x900, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6108)  # V1 = 8
        state = execute(state, 0xA900)  # I = 0x900

        # Draw only first 3 rows (N=3)
        state = execute(state, 0xD013)

        # Check only first 3 pixels of diagonal
        assert state.display[10, 8] == 1  # Row 0: 0x80 → bit 7
        assert state.display[11, 9] == 1  # Row 1: 0x40 → bit 6
        assert state.display[12, 10] == 1  # Row 2: 0x20 → bit 5
        assert state.display[13, 11] == 0  # Row 3: not drawn (N=3)

    def test_font_glyph(self, fresh_state):
        """Draw the built-in glyph for 0 at the origin."""
        state = execute(fresh_state, 0x6200)  # V2 = 0
        state = execute(state, 0xF229)  # I = glyph 0
        state = execute(state, 0xD005)

        for x in range(4):
            assert state.display[x, 0] == 1
            assert state.display[x, 4] == 1
        assert state.display[0, 2] == 1
        assert state.display[3, 2] == 1
        assert state.display[1, 2] == 0
        assert state.display[4, 0] == 0

    def test_vf_register_preservation(self, fresh_state):
        """Test that VF is properly set/cleared."""
        state = fresh_state

        sprite = [0x80]
        state = setup_sprite_in_memory(state, 0xB00, sprite)

        # Set VF to 1 initially
        state = execute(state, 0x6F01)  # VF = 1

        # Draw sprite with no collision
        state = execute(state, 0x6005)  # V0 = 5
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xAB00)  # I = 0xB00
        state = execute(state, 0xD011)

        # VF should be cleared to 0 (no collision)
        assert state.V[15] == 0


class TestSpriteMemoryBounds:
    """Test sprite reads near the end of memory."""

    def test_sprite_ending_at_last_byte(self, fresh_state):
        """A sprite whose last row is at 0xFFF is drawn."""
        state = setup_sprite_in_memory(fresh_state, 0xFFD, [0x80, 0x80, 0x80])
        state = execute(state, 0xAFFD)

        state = execute(state, 0xD013)

        assert jnp.sum(state.display) == 3

    def test_sprite_past_end_of_memory(self, fresh_state):
        """A sprite read running past 0xFFF faults without drawing."""
        state = execute(fresh_state, 0xAFFE)

        with pytest.raises(MemoryAddressOutOfRange) as excinfo:
            execute(state, 0xD013)
        assert excinfo.value.address == 0xFFE
        assert excinfo.value.length == 3
