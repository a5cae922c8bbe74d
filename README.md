# causaltree

Building blocks for causal trees. These are recursive partitioning trees
that look for subgroups whose treatment effect differs, rather than
subgroups whose outcome differs.

The package uses only the standard library.

## What is inside

### Split rule

`causaltree.anova` is a split rule that scores a node by its weighted
squared treatment effect.

- `anova_eval(y, wt, treatment, max_y)` returns a `NodeEstimate` for a node.
  It holds the effect (`value`), the treated and control means, and the
  node's risk.
- `anova_split(y, x, nclass, edge, wt, treatment, minsize)` searches one
  predictor for its best split and returns a `SplitChoice` with:
  - `improve`, the improvement;
  - `split`, the cut point, for a continuous predictor;
  - `csplit`, the direction codes.

  A continuous predictor has `nclass` 0, and its observations must come in
  increasing order of `x`. A categorical predictor has levels coded
  `1..nclass`. Each side of a split needs at least `edge` observations, and
  at least `minsize` weight of treated units and `minsize` weight of control
  units.
- `anova_pred(y, wt, treatment, yhat, p)` gives the weighted squared error
  of a prediction against the transformed outcome.

### Tree structure

`causaltree.model` holds the tree and the data of a fitting run.

- `Split` and `Node` make up the tree.
- `LEFT`, `RIGHT` and `MISSING` are the direction codes.
- `insert_split` keeps a bounded list of candidate splits, in decreasing
  order of improvement.
- `Node.fix_cp` lowers the complexity of every node in a subtree so that no
  node exceeds its parent.
- `TreeData` holds the predictors, responses, weights, treatment and
  settings of a run. `TreeData.compute_sorts` builds the per-variable
  observation orderings, with missing values coded negative.

### Search helpers

- `causaltree.sorting.sort_carrying` sorts values and permutes a companion
  list the same way.
- `causaltree.graycode` gives the orders in which categories move from the
  right group to the left:
  - `ordered_moves`, by a ranking value;
  - `gray_moves`, as a Gray code over all subsets.
- `causaltree.surrogate.choose_surrogate` finds the split of one variable
  that best reproduces a primary split. It returns a `SurrogateResult` with
  the agreement and the adjusted agreement.

### Walking the tree

`causaltree.navigation` moves observations down the tree.

- `branch(tree, obs, data)` moves one observation one level down. When the
  primary variable is missing it uses surrogates, and then the default
  direction.
- `node_split(me, nodenum, n1, n2, data)` sends all of a node's observations
  to its sons. It updates `data.which` and reorders `data.sorts`.

### Complexity table

`causaltree.cptable` builds the complexity table.

- `CpTable` and `CpEntry` hold the table.
- `make_cp_list` collects the unique complexity parameters of a tree.
- `make_cp_table` fills in the risk and the split count of each row.

### Estimation on new data

These functions work on a tree stored as flat tables, a
`causaltree.estimate.TreeFrame`.

- `causaltree.estimate.estimate_tree` returns the node at which each new
  observation comes to rest.
- `causaltree.honest.honest_estimate_causal_tree` runs a separate sample
  down the tree. It re-estimates each node's treatment effect and deviance
  and returns a `HonestEstimate`.
- `causaltree.rpart_honest.honest_estimate_rpart_tree` does the same for a
  plain regression tree and returns an `RpartHonestEstimate` holding node
  means.

## Example

```python
from causaltree.anova import anova_eval, anova_split

y = [1.0, 2.0, 1.5, 3.0, 4.0, 3.5, 5.0, 6.0]
wt = [1.0] * 8
treatment = [0, 1, 0, 1, 0, 1, 0, 1]
x = [1, 2, 3, 4, 5, 6, 7, 8]

node = anova_eval(y, wt, treatment, max_y=6.0)
choice = anova_split(y, x, 0, 2, wt, treatment, 1)
print(node.value, node.risk)
print(choice.improve, choice.split, choice.csplit)
```

When no admissible split exists, `choice.improve` is 0.

## What the package does not do

The package supplies pieces, not a finished tree-growing procedure.

- There is no single function that grows and prunes a whole tree from a
  data set.
- There is no cross-validation over the complexity table.
- The only split rule is the one in `causaltree.anova`. There are no
  variance-penalised rules and no bucketed rules for continuous predictors.
- There is no command-line program.

To grow a tree, combine `TreeData`, `anova_split`, `insert_split`,
`node_split` and the complexity-table functions yourself.

## Running the tests

```
pip install -e ".[test]"
pytest
```