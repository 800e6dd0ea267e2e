"""
Combat and front-line resolution, run once per turn boundary.

Every lane is resolved from a snapshot taken at the start of the tick and the
results are written back to the board only after all lanes are done, so the
outcome does not depend on the order lanes are visited in.
"""
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from ..board import Board
from ..config import MatchSettings
from ..models import LaneReport, MatchState, ResolutionReport, SideId, Unit


class CombatResolver:

    def __init__(self, state: MatchState, board: Board, settings: MatchSettings):
        self.state = state
        self.board = board
        self.settings = settings

    # --- Pressure & push ---

    def lane_pressure(self, units: List[Unit], lane: int) -> Dict[SideId, float]:
        """Terrain-weighted strength of each side in or adjacent to a lane."""
        reach = set(self.board.lanes_within(lane, self.settings.LANE_REACH))
        pressure = {side: 0.0 for side in SideId}
        for unit in units:
            if unit.position.lane not in reach:
                continue
            tile = self.board.tile_at(unit.position.lane, unit.position.depth)
            weight = tile.weight if tile else 1.0
            pressure[unit.side] += unit.strength * weight
        return pressure

    def push_steps(self, differential: float) -> int:
        if differential <= 0:
            return 0
        steps = int(differential // max(1, self.settings.STRENGTH_PER_STEP))
        return min(self.settings.MAX_FRONT_LINE_STEP, max(1, steps))

    # --- Per-lane combat ---

    def _clash(self, units: List[Unit]) -> Tuple[int, Set[str]]:
        """Units facing each other on adjacent rows trade equal strength."""
        opponents = {u.position.depth: u for u in units if u.side == SideId.OPPONENT}
        attrition = 0
        engaged: Set[str] = set()
        for unit in sorted((u for u in units if u.side == SideId.PLAYER), key=lambda u: u.position.depth):
            enemy = opponents.get(unit.position.depth + 1)
            if not enemy:
                continue
            loss = min(unit.strength, enemy.strength)
            unit.strength -= loss
            enemy.strength -= loss
            attrition += 2 * loss
            engaged.update({unit.id, enemy.id})
        return attrition, engaged

    def _advance(self, survivors: List[Unit], acting_side: SideId, engaged: Set[str]) -> List[Unit]:
        """Moves the acting side's free units, front unit first. Returns the units that scored."""
        forward = acting_side.forward
        enemy_baseline = self.board.baseline(acting_side.enemy)
        movers = sorted(
            (u for u in survivors if u.side == acting_side and u.id not in engaged),
            key=lambda u: u.position.depth * -forward,
        )
        scored: List[Unit] = []
        for unit in movers:
            scored_ids = {u.id for u in scored}
            occupied = {u.position.depth for u in survivors if u.id != unit.id and u.id not in scored_ids}
            depth = unit.position.depth
            for _ in range(max(0, unit.advance_rate)):
                step = depth + forward
                if step in occupied:
                    break
                if step == enemy_baseline:
                    scored.append(unit)
                    break
                depth = step
            unit.position = unit.position.model_copy(update={"depth": depth})
        return scored

    def _resolve_lane(self, units: List[Unit], acting_side: SideId, report: LaneReport) -> Tuple[List[Unit], List[Unit]]:
        report.strength_before = sum(u.strength for u in units)
        report.attrition, engaged = self._clash(units)
        survivors = [u for u in units if u.strength > 0]
        scored = self._advance(survivors, acting_side, engaged)
        report.damage_dealt = sum(u.strength for u in scored)
        scored_ids = {u.id for u in scored}
        survivors = [u for u in survivors if u.id not in scored_ids]
        report.strength_after = sum(u.strength for u in survivors)
        survivor_ids = {u.id for u in survivors}
        removed = [u for u in units if u.id not in survivor_ids]
        return survivors, removed

    # --- Front lines ---

    def _advance_target(self, side: SideId) -> int:
        line = self.board.front_line_position(side)
        units = self.board.living_units(side)
        if not units:
            return line
        depths = [u.position.depth for u in units]
        vanguard = max(depths) if side == SideId.PLAYER else min(depths)
        gain = (vanguard - line) * side.forward
        if gain <= 0:
            return line
        return line + side.forward * min(gain, self.settings.MAX_FRONT_LINE_STEP)

    def _move_front_lines(self, retreat: Dict[SideId, int], contested: Set[SideId]) -> Dict[SideId, int]:
        """
        A side that lost a lane retreats. A side with no lane outcome at all
        follows its vanguard. A lane winner holds its line.
        """
        moves: Dict[SideId, int] = {}
        for side in SideId:
            old = self.board.front_line_position(side)
            if retreat[side] > 0:
                target = old - side.forward * retreat[side]
            elif side in contested:
                target = old
            else:
                target = self._advance_target(side)
            new = self.board.set_front_line(side, target)
            if new != old:
                moves[side] = new
                self.state.add_log(f"{self.state.side(side).name}'s front line moves {old} -> {new}.")
        return moves

    # --- Tick ---

    def resolve(self, acting_side: SideId) -> ResolutionReport:
        snapshot = self.board.snapshot()
        by_lane: Dict[int, List[Unit]] = defaultdict(list)
        for unit in snapshot:
            by_lane[unit.position.lane].append(unit)

        report = ResolutionReport(acting_side=acting_side, damage={side: 0 for side in SideId})
        retreat = {side: 0 for side in SideId}
        contested: Set[SideId] = set()
        survivors: List[Unit] = []
        removed: List[Unit] = []

        for lane in range(self.board.lane_count):
            lane_report = LaneReport(lane=lane, pressure=self.lane_pressure(snapshot, lane))
            player, opponent = lane_report.pressure[SideId.PLAYER], lane_report.pressure[SideId.OPPONENT]
            if player != opponent:
                lane_report.winner = SideId.PLAYER if player > opponent else SideId.OPPONENT
                lane_report.push = self.push_steps(abs(player - opponent))
                loser = lane_report.winner.enemy
                retreat[loser] = max(retreat[loser], lane_report.push)
                contested.update({loser, lane_report.winner})

            lane_survivors, lane_removed = self._resolve_lane(by_lane.get(lane, []), acting_side, lane_report)
            survivors.extend(lane_survivors)
            removed.extend(lane_removed)
            report.damage[acting_side.enemy] += lane_report.damage_dealt
            report.lanes.append(lane_report)

        # Write back
        for unit in removed:
            self.board.remove_unit(unit.id)
            report.removed_unit_ids.append(unit.id)
        for unit in survivors:
            live = self.board.units[unit.id]
            live.strength = unit.strength
            live.position = unit.position

        target = self.state.side(acting_side.enemy)
        damage = report.damage[acting_side.enemy]
        if damage:
            target.health = max(0, target.health - damage)
            self.state.add_log(f"{target.name} takes {damage} damage ({target.health} left).")

        report.front_line_moves = self._move_front_lines(retreat, contested)
        if target.is_defeated:
            report.losing_side = target.side_id
        return report
